"""
Item container for publishing one or more formats together.
"""

from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .exceptions import DuplicateFormatError
from .format import Format


class Item:
    """
    A bundle of formats plus an optional id and previous id.
    
    Each format must have a distinct name. The item is serialized once per
    channel when published, so export() returns a new dict on every call.
    
    Example:
        >>> item = Item(JsonObjectFormat({"text": "hi"}), id="2", prev_id="1")
        >>> item.export()
        {'id': '2', 'prev-id': '1', 'json-object': {'text': 'hi'}}
    """

    def __init__(
        self,
        formats: Union[Format, Sequence[Format]],
        id: Optional[str] = None,
        prev_id: Optional[str] = None,
    ):
        """
        Initialize the item.
        
        Args:
            formats: A single Format or a sequence of formats
            id: Optional item id
            prev_id: Optional id of the previous item on the channel
        """
        if isinstance(formats, Format):
            formats = [formats]
        self._formats: Tuple[Format, ...] = tuple(formats)
        self._id = id
        self._prev_id = prev_id

    @property
    def formats(self) -> Tuple[Format, ...]:
        return self._formats

    @property
    def id(self) -> Optional[str]:
        return self._id

    @property
    def prev_id(self) -> Optional[str]:
        return self._prev_id

    def export(self) -> Dict[str, Any]:
        """
        Serialize the item into a publish-ready record.
        
        Returns:
            Dict with optional 'id' and 'prev-id' keys and one key per format
            
        Raises:
            DuplicateFormatError: If two formats share the same name
        """
        seen = set()
        for fmt in self._formats:
            format_name = fmt.name()
            if format_name in seen:
                raise DuplicateFormatError(
                    f"more than one instance of {format_name} specified",
                    format_name=format_name,
                )
            seen.add(format_name)

        out: Dict[str, Any] = {}
        if self._id:
            out["id"] = self._id
        if self._prev_id:
            out["prev-id"] = self._prev_id

        for fmt in self._formats:
            out[fmt.name()] = fmt.export()

        return out

    def __repr__(self) -> str:
        names = ", ".join(fmt.name() for fmt in self._formats)
        return f"Item(formats=[{names}], id={self._id!r}, prev_id={self._prev_id!r})"
