from blogapi.utils.helpers import get_summary, host, normalize_tag_names, today_str

__all__ = ["get_summary", "host", "normalize_tag_names", "today_str"]
