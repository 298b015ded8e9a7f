"""时间戳类型

所有模型时间字段都是带时区的 datetime；naive 值在构造时按 UTC 解释。
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator


def ensure_utc(value: datetime) -> datetime:
    """naive datetime 附加 UTC 时区，aware datetime 原样返回"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
