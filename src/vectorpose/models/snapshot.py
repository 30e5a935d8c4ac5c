"""
Part snapshot - immutable reading of one part's animatable attributes
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from vectorpose.models.transform import Transform


@dataclass(frozen=True)
class PartSnapshot:
    """
    Animatable attributes of a part in one pose

    numeric: Recognized numeric attributes present on the element
    colors: Recognized color properties, normalized (hex where parseable)
    transform: Raw transform attribute, None when absent
    """

    numeric: Mapping[str, float] = field(default_factory=dict)
    colors: Mapping[str, str] = field(default_factory=dict)
    transform: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "numeric", MappingProxyType(dict(self.numeric)))
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))

    @property
    def parsed_transform(self) -> Transform:
        return Transform.parse(self.transform)
