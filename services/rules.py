# Reglas de negocio: prioridad, departamento y etiquetas de presentación
from typing import Optional, Union

from models.enums import IssueCategory, IssuePriority, IssueStatus

DEFAULT_COLOR = "#64748b"
DEFAULT_DEPARTMENT = "General Services"

CATEGORY_LABELS = {
    IssueCategory.POTHOLES: "Potholes",
    IssueCategory.STREETLIGHTS: "Streetlights",
    IssueCategory.SANITATION: "Sanitation",
    IssueCategory.GRAFFITI: "Graffiti",
    IssueCategory.FLOODING: "Flooding",
    IssueCategory.TRAFFIC_SIGNS: "Traffic Signs",
    IssueCategory.PARKS: "Parks & Recreation",
    IssueCategory.OTHER: "Other",
}

CATEGORY_ICONS = {
    IssueCategory.POTHOLES: "🕳️",
    IssueCategory.STREETLIGHTS: "💡",
    IssueCategory.SANITATION: "🗑️",
    IssueCategory.GRAFFITI: "🎨",
    IssueCategory.FLOODING: "🌊",
    IssueCategory.TRAFFIC_SIGNS: "🚏",
    IssueCategory.PARKS: "🌳",
    IssueCategory.OTHER: "📝",
}

CATEGORY_COLORS = {
    IssueCategory.POTHOLES: "#ef4444",
    IssueCategory.STREETLIGHTS: "#f59e0b",
    IssueCategory.SANITATION: "#10b981",
    IssueCategory.GRAFFITI: "#8b5cf6",
    IssueCategory.FLOODING: "#3b82f6",
    IssueCategory.TRAFFIC_SIGNS: "#f97316",
    IssueCategory.PARKS: "#22c55e",
    IssueCategory.OTHER: "#64748b",
}

PRIORITY_LABELS = {
    IssuePriority.LOW: "Low",
    IssuePriority.MEDIUM: "Medium",
    IssuePriority.HIGH: "High",
    IssuePriority.CRITICAL: "Critical",
}

PRIORITY_COLORS = {
    IssuePriority.LOW: "#10b981",
    IssuePriority.MEDIUM: "#f59e0b",
    IssuePriority.HIGH: "#f97316",
    IssuePriority.CRITICAL: "#ef4444",
}

# Peso para ordenar por urgencia en el panel
PRIORITY_ORDER = {
    IssuePriority.CRITICAL: 4,
    IssuePriority.HIGH: 3,
    IssuePriority.MEDIUM: 2,
    IssuePriority.LOW: 1,
}

STATUS_LABELS = {
    IssueStatus.REPORTED: "Reported",
    IssueStatus.ACKNOWLEDGED: "Acknowledged",
    IssueStatus.IN_PROGRESS: "In Progress",
    IssueStatus.RESOLVED: "Resolved",
    IssueStatus.CLOSED: "Closed",
}

STATUS_COLORS = {
    IssueStatus.REPORTED: "#64748b",
    IssueStatus.ACKNOWLEDGED: "#3b82f6",
    IssueStatus.IN_PROGRESS: "#f59e0b",
    IssueStatus.RESOLVED: "#10b981",
    IssueStatus.CLOSED: "#6b7280",
}

DEPARTMENT_BY_CATEGORY = {
    IssueCategory.POTHOLES: "Public Works",
    IssueCategory.STREETLIGHTS: "Electrical Services",
    IssueCategory.SANITATION: "Waste Management",
    IssueCategory.GRAFFITI: "Code Enforcement",
    IssueCategory.FLOODING: "Storm Water Management",
    IssueCategory.TRAFFIC_SIGNS: "Transportation",
    IssueCategory.PARKS: "Parks and Recreation",
    IssueCategory.OTHER: DEFAULT_DEPARTMENT,
}

CRITICAL_CATEGORIES = {IssueCategory.FLOODING, IssueCategory.TRAFFIC_SIGNS}
HIGH_CATEGORIES = {IssueCategory.POTHOLES, IssueCategory.STREETLIGHTS}
URGENT_KEYWORDS = ("urgent", "emergency", "dangerous", "hazard", "safety", "immediate")


def _enum_or_none(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def compute_priority(
    category: Union[IssueCategory, str], description: Optional[str] = None
) -> IssuePriority:
    category = _enum_or_none(IssueCategory, category)

    if category in CRITICAL_CATEGORIES:
        return IssuePriority.CRITICAL
    if category in HIGH_CATEGORIES:
        return IssuePriority.HIGH

    # Palabras de urgencia en la descripción suben la prioridad
    if description:
        lowered = description.lower()
        if any(keyword in lowered for keyword in URGENT_KEYWORDS):
            return IssuePriority.HIGH

    return IssuePriority.MEDIUM


def department_for_category(category: Union[IssueCategory, str]) -> str:
    category = _enum_or_none(IssueCategory, category)
    return DEPARTMENT_BY_CATEGORY.get(category, DEFAULT_DEPARTMENT)


def category_label(category) -> str:
    return CATEGORY_LABELS.get(_enum_or_none(IssueCategory, category), "Unknown")


def category_icon(category) -> str:
    return CATEGORY_ICONS.get(_enum_or_none(IssueCategory, category), "📝")


def category_color(category) -> str:
    return CATEGORY_COLORS.get(_enum_or_none(IssueCategory, category), DEFAULT_COLOR)


def priority_label(priority) -> str:
    return PRIORITY_LABELS.get(_enum_or_none(IssuePriority, priority), "Unknown")


def priority_color(priority) -> str:
    return PRIORITY_COLORS.get(_enum_or_none(IssuePriority, priority), DEFAULT_COLOR)


def status_label(status) -> str:
    return STATUS_LABELS.get(_enum_or_none(IssueStatus, status), "Unknown")


def status_color(status) -> str:
    return STATUS_COLORS.get(_enum_or_none(IssueStatus, status), DEFAULT_COLOR)


def is_valid_status(status) -> bool:
    return _enum_or_none(IssueStatus, status) is not None
