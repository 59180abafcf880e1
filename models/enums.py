from enum import Enum

# Estados posibles de un reporte en el flujo de trabajo
class IssueStatus(str, Enum):
    REPORTED = "reported"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

# Niveles de prioridad para los reportes
class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

# Categorías de incidencias que puede reportar un vecino
class IssueCategory(str, Enum):
    POTHOLES = "potholes"
    STREETLIGHTS = "streetlights"
    SANITATION = "sanitation"
    GRAFFITI = "graffiti"
    FLOODING = "flooding"
    TRAFFIC_SIGNS = "traffic-signs"
    PARKS = "parks"
    OTHER = "other"

# Tipos de objeto en el almacén de contenido (nombre de colección)
class ObjectType(str, Enum):
    ISSUE_REPORT = "issue-reports"
    DEPARTMENT = "departments"
    STAFF_MEMBER = "staff-members"
    CATEGORY = "categories"
    COMMENT = "comments"

# Rangos de fecha del filtro del mapa
class DateRange(str, Enum):
    ALL = "all"
    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"

# Criterios de orden del panel de administración
class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    PRIORITY = "priority"
