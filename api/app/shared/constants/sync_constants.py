"""
Constantes de la sincronizacion offline.
Define las tablas sincronizables, su columna de identidad y los
campos de control que envian los clientes.
"""
from enum import Enum
from types import MappingProxyType


class MappingStatus(str, Enum):
    """Resultado de reconciliar un registro del cliente."""
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"
    SKIPPED = "skipped"
    NOOP = "noop"
    ERROR = "error"


# Columnas con significado fijo en todas las tablas sincronizables
TENANT_COLUMN = "tenant_id"
CLIENT_UUID_COLUMN = "client_uuid"
SERVER_VERSION_COLUMN = "server_version"

# sync_status == 3 significa "borrar"; cualquier otro valor es upsert
SYNC_STATUS_DELETE = 3
SYNC_STATUS_DEFAULT = 0

# Campos de contabilidad del cliente: nunca se persisten en el servidor
PROTECTED_CLIENT_FIELDS = frozenset({"server_id", "local_version", "local_updated_at"})

# Campos que gestiona el servidor y nunca se toman del payload
SERVER_MANAGED_FIELDS = frozenset({SERVER_VERSION_COLUMN})

# Tabla -> columna de identidad (PK asignada por el servidor).
# Solo lectura durante toda la vida del proceso.
TABLE_IDENTITY_COLUMNS = MappingProxyType({
    "customer": "cusid",
    "staff": "staffid",
    "supplier": "supid",
    "branch": "brid",
    "bank": "bankid",
    "purchase": "purid",
    "sales": "saleid",
    "bankcash": "bpid",
    "expense": "expid",
    "income": "incomeid",
    "cheque": "chqid",
    "salary": "salid",
    "customerpayment": "cuspayid",
    "itemmaster": "itemid",
    "bill": "billid",
    "genbill": "genbillno",
    "shop": "shopid",
    "expgroup": "expgpid",
    "incgroup": "incgpid",
})

# Tablas permitidas (protege contra escrituras arbitrarias)
ALLOWED_SYNC_TABLES = frozenset({
    "branch", "bank", "supplier", "staff", "expgroup", "incgroup", "purchase",
    "customer", "sales", "bankcash", "expense", "income", "cheque", "salary",
    "customerpayment", "itemmaster", "bill", "genbill", "shop",
})
