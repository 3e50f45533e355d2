from typing import Optional

from app.settings import TRUNCATION_MARKER


def truncate(value: Optional[str], limit: int, marker: str = TRUNCATION_MARKER) -> Optional[str]:
    """Cắt chuỗi quá dài trước khi lưu, thêm marker để người đọc biết đã bị cắt.

    `None` được giữ nguyên (kết quả lỗi không có stdout/stderr).
    """
    if value is None:
        return None
    if len(value) <= limit:
        return value
    return value[:limit] + marker
