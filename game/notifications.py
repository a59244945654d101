"""
通知

对局结果、非法操作、AI 异常等提示。仅供界面展示，不携带状态。
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)


class NotificationLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """
    一条通知

    Attributes:
        message: 提示内容
        level: 级别
        details: 附加信息 (如异常消息)
    """
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    details: Optional[str] = None


NotificationCallback = Callable[[Notification], None]


class Notifier:
    """
    通知分发器

    所有通知都会写入日志，并转发给已注册的回调；
    只保留最近 history_size 条历史
    """

    def __init__(self, history_size: int = 100):
        self._callbacks: List[NotificationCallback] = []
        self.history: deque = deque(maxlen=history_size)

    def subscribe(self, callback: NotificationCallback) -> Callable[[], None]:
        """
        注册回调

        Returns:
            取消注册的函数
        """
        self._callbacks.append(callback)

        def unsubscribe():
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
        details: Optional[str] = None,
    ) -> Notification:
        notification = Notification(message, level, details)
        self.history.append(notification)

        if level == NotificationLevel.ERROR:
            logger.warning(f"{message} {details or ''}".rstrip())
        else:
            logger.info(message)

        for callback in list(self._callbacks):
            callback(notification)
        return notification

    def info(self, message: str, details: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.INFO, details)

    def success(self, message: str, details: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.SUCCESS, details)

    def error(self, message: str, details: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.ERROR, details)
