"""Base class for records owned by the data service."""

from pydantic import BaseModel, ConfigDict


class BaseEntity(BaseModel):
    """Typed view of a data service row.

    行结构来自外部服务，不完全可信：未知列忽略，缺失列使用默认值，
    在进入领域层时完成校验。
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )
