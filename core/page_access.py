"""
Dashboard page access.

Each member sees a set of dashboard pages. Admins and super admins always
see every page. Other members see the pages granted to them in their
company, or their role's defaults when nothing has been granted.
"""
from database.models.role import AppRole


PAGE_CATEGORIES = {
    "management": {"label_en": "Management", "label_ar": "الإدارة"},
    "operations": {"label_en": "Operations", "label_ar": "العمليات"},
    "sales": {"label_en": "Sales", "label_ar": "المبيعات"},
    "communication": {"label_en": "Communication", "label_ar": "التواصل"},
    "settings": {"label_en": "Settings", "label_ar": "الإعدادات"},
}

PAGE_DEFINITIONS = [
    {"key": "dashboard", "label_en": "Dashboard", "label_ar": "لوحة التحكم", "path": "/dashboard", "category": "management"},
    {"key": "departments", "label_en": "Departments", "label_ar": "الأقسام", "path": "/dashboard/departments", "category": "management"},
    {"key": "employees", "label_en": "Employees", "label_ar": "الموظفين", "path": "/dashboard/employees", "category": "management"},
    {"key": "team-management", "label_en": "Team Management", "label_ar": "إدارة الفريق", "path": "/dashboard/team-management", "category": "management"},
    {"key": "balance", "label_en": "Load Balance", "label_ar": "توازن العمل", "path": "/dashboard/balance", "category": "management"},
    {"key": "delayed", "label_en": "Delayed Tasks", "label_ar": "المهام المتأخرة", "path": "/dashboard/delayed", "category": "management"},
    {"key": "tasks", "label_en": "Tasks", "label_ar": "المهام", "path": "/dashboard/tasks", "category": "operations"},
    {"key": "events", "label_en": "Events", "label_ar": "الأحداث", "path": "/dashboard/events", "category": "operations"},
    {"key": "manual", "label_en": "Manual Items", "label_ar": "العناصر اليدوية", "path": "/dashboard/manual", "category": "operations"},
    {"key": "meetings", "label_en": "Meetings", "label_ar": "الاجتماعات", "path": "/dashboard/meetings", "category": "operations"},
    {"key": "leads", "label_en": "Leads", "label_ar": "العملاء المحتملين", "path": "/dashboard/leads", "category": "sales"},
    {"key": "clients", "label_en": "Clients", "label_ar": "العملاء", "path": "/dashboard/clients", "category": "sales"},
    {"key": "contracts", "label_en": "Contracts", "label_ar": "العقود", "path": "/dashboard/contracts", "category": "sales"},
    {"key": "chat", "label_en": "Chat", "label_ar": "الدردشة", "path": "/dashboard/chat", "category": "communication"},
    {"key": "ai-insights", "label_en": "AI Insights", "label_ar": "رؤى AI", "path": "/dashboard/ai-insights", "category": "settings"},
    {"key": "settings", "label_en": "Company Settings", "label_ar": "إعدادات الشركة", "path": "/dashboard/settings", "category": "settings"},
    {"key": "team", "label_en": "Team Settings", "label_ar": "إعدادات الفريق", "path": "/dashboard/team", "category": "settings"},
    {"key": "account", "label_en": "My Account", "label_ar": "حسابي", "path": "/dashboard/account", "category": "settings"},
]

PAGE_KEYS = [page["key"] for page in PAGE_DEFINITIONS]

ROLE_DEFAULT_PAGES = {
    AppRole.SUPER_ADMIN: PAGE_KEYS,
    AppRole.ADMIN: PAGE_KEYS,
    AppRole.EMPLOYEE: ["dashboard", "tasks", "meetings", "chat", "account"],
}


def get_pages_by_category() -> dict[str, list[dict]]:
    """Group the page catalogue by category, keeping catalogue order."""
    grouped: dict[str, list[dict]] = {}
    for page in PAGE_DEFINITIONS:
        grouped.setdefault(page["category"], []).append(page)
    return grouped


def find_unknown_pages(keys: list[str]) -> list[str]:
    return [key for key in keys if key not in PAGE_KEYS]


def resolve_pages(role: AppRole | None, granted: list[str]) -> list[str]:
    """Pages a member may open, given their role and stored grants."""
    role = role or AppRole.EMPLOYEE
    if role in (AppRole.ADMIN, AppRole.SUPER_ADMIN):
        return list(PAGE_KEYS)
    if granted:
        return list(granted)
    return list(ROLE_DEFAULT_PAGES[role])
