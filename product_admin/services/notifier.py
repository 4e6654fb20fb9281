"""
User-facing notices raised by editor, resolver and import operations.
Rendering is left to the caller; notices are recorded in order and logged.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from product_admin.core.logger import logger


class Notice(BaseModel):
    level: Literal["success", "error"]
    title: str
    message: Optional[str] = None


class Notifier:
    """Collects success and error notices for the current session"""

    def __init__(self):
        self.notices: List[Notice] = []

    def show_success(self, title: str, message: Optional[str] = None) -> Notice:
        notice = Notice(level="success", title=title, message=message)
        self.notices.append(notice)
        logger.info(title, metadata={"event": "notice_success", "detail": message})
        return notice

    def show_error(self, title: str, message: Optional[str] = None) -> Notice:
        notice = Notice(level="error", title=title, message=message)
        self.notices.append(notice)
        logger.warning(title, metadata={"event": "notice_error", "detail": message})
        return notice

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    @property
    def errors(self) -> List[Notice]:
        return [notice for notice in self.notices if notice.level == "error"]

    def clear(self) -> None:
        self.notices.clear()
