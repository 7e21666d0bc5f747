"""
Internationalization Messages

UI text in multiple languages for the status board.
"""

DEFAULT_LANG = "cht"

# Shared across every language
EVENT = "大埔宏福苑五級火"

MESSAGES = {
    "cht": {
        "title": "平安通報程式",
        "subtitle": "緊急狀態佈告欄",
        "update_header": "更新您的狀態",
        "lbl_name": "全名",
        "ph_name": "例：陳大文",
        "lbl_id": "身份證號碼",
        "hint_id": "(可用於搜尋，但不對外公開)",
        "ph_id": "例：員工編號或身份證號碼",
        "lbl_loc": "目前位置",
        "ph_loc": "例：避難所#3, 灣仔",
        "lbl_status": "狀態",
        "opt_safe": "我平安無事",
        "opt_help": "我需要幫助",
        "opt_other": "其他 / 正在移動",
        "lbl_msg": "訊息 (選填)",
        "ph_msg": "我有水和食物。請聯繫...",
        "btn_submit": "發佈更新",
        "search_ph": "按姓名、ID、位置搜尋...",
        "btn_search": "搜尋",
        "empty_state": "找不到任何更新。",
        "meta_loc": "位置",
        "meta_time": "時間",
        "err_db": "資料庫暫時無法使用。",
        "err_req": "姓名和狀態是必需的。",
        "err_invalid": "提交的資料無效或過長。",
        "err_save": "儲存狀態時出錯",
        "err_delete": "刪除記錄時出錯",
        "prev_page": "上一頁",
        "next_page": "下一頁",
        "page_info": "第 {page} 頁",
        "btn_delete": "刪除",
        "err_auth": "身份驗證失敗或權限不足。",
        "confirm_delete": "確定要刪除此記錄嗎？",
        "err_id": "無法刪除：缺少記錄 ID。",
        "admin_mode": "管理模式",
        "admin_logout": "登出",
        "lang_name": "繁體中文",
    },
    "en": {
        "title": "I Am Safe",
        "subtitle": "Emergency Status Board",
        "update_header": "Update Your Status",
        "lbl_name": "Full Name",
        "ph_name": "e.g. Chan Tai Man",
        "lbl_id": "ID Number",
        "hint_id": "(searchable, never displayed)",
        "ph_id": "e.g. staff number or ID card number",
        "lbl_loc": "Current Location",
        "ph_loc": "e.g. Shelter #3, Wan Chai",
        "lbl_status": "Status",
        "opt_safe": "I am safe",
        "opt_help": "I need help",
        "opt_other": "Other / On the move",
        "lbl_msg": "Message (optional)",
        "ph_msg": "I have water and food. Please contact...",
        "btn_submit": "Post Update",
        "search_ph": "Search by name, ID, location...",
        "btn_search": "Search",
        "empty_state": "No updates found.",
        "meta_loc": "Location",
        "meta_time": "Time",
        "err_db": "The database is temporarily unavailable.",
        "err_req": "Name and status are required.",
        "err_invalid": "Submitted data is invalid or too long.",
        "err_save": "Error saving status",
        "err_delete": "Error deleting record",
        "prev_page": "« Prev",
        "next_page": "Next »",
        "page_info": "Page {page}",
        "btn_delete": "Delete",
        "err_auth": "Authentication failed or insufficient permissions.",
        "confirm_delete": "Delete this record?",
        "err_id": "Cannot delete: missing record ID.",
        "admin_mode": "Admin mode",
        "admin_logout": "Log out",
        "lang_name": "English",
    },
}

# Stored status value -> message key of its badge label
STATUS_LABELS = {
    "Safe": "opt_safe",
    "Help": "opt_help",
    "Other": "opt_other",
}


def resolve_language(lang: str | None, default: str = DEFAULT_LANG) -> str:
    """Return ``lang`` if it is a known code, otherwise ``default``."""
    if lang in MESSAGES:
        return lang
    if default in MESSAGES:
        return default
    return DEFAULT_LANG
