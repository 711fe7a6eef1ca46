"""Monitor type catalog schemas."""
from typing import Any, Dict, Optional

from pydantic import Field

from .monitor import CamelModel


class MonitorTypeDescriptor(CamelModel):
    """A supported check kind and the configuration it accepts."""
    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    category: str = ""
    configuration_schema: Dict[str, Any] = Field(default_factory=dict)
    is_premium: bool = False
    icon: Optional[str] = None
    icon_color: Optional[str] = None


class MonitorTypeResponse(MonitorTypeDescriptor):
    """Descriptor as listed to the dashboard."""
    selectable: bool = True
