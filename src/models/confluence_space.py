"""Confluence space data model."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Space:
    """Confluence space.

    Attributes:
        id: Numeric space ID as a string (obtained differently per dialect)
        key: Durable human identifier (e.g., "DEV")
        name: Display name
        type: "global" or "personal"
        status: "current" or "archived"
        homepage_id: ID of the space homepage
    """
    id: str
    key: str = ""
    name: str = ""
    type: str = ""
    status: str = ""
    homepage_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Space':
        """Build a Space from a v2 API space object."""
        return cls(
            id=str(data.get('id') or ""),
            key=data.get('key') or "",
            name=data.get('name') or "",
            type=data.get('type') or "",
            status=data.get('status') or "",
            homepage_id=str(data.get('homepageId') or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'key': self.key,
            'name': self.name,
            'type': self.type,
            'status': self.status,
            'homepageId': self.homepage_id,
        }
