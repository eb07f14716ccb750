"""
Type descriptions for engine inputs and outputs.

The engine reports each input/output with a type string such as
``tensor(float)``, ``seq(tensor(int64))`` or ``map(string,tensor(float))``
and a declared shape whose dimensions may be integers or symbolic names.
This module turns those into a TypeInfo with a closed ElementType enumeration
(values aligned with ``onnx.TensorProto``) and a resolved element count.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Sequence, Tuple

from onnx import TensorProto


class ValueKind(Enum):
    """Kind of value an engine input or output carries."""

    TENSOR = "tensor"
    SPARSE_TENSOR = "sparse_tensor"
    SEQUENCE = "seq"
    MAP = "map"
    OPTIONAL = "optional"
    UNKNOWN = "unknown"


class ElementType(IntEnum):
    """Tensor element types, numbered as in ``onnx.TensorProto``."""

    UNDEFINED = TensorProto.UNDEFINED
    FLOAT = TensorProto.FLOAT
    UINT8 = TensorProto.UINT8
    INT8 = TensorProto.INT8
    UINT16 = TensorProto.UINT16
    INT16 = TensorProto.INT16
    INT32 = TensorProto.INT32
    INT64 = TensorProto.INT64
    STRING = TensorProto.STRING
    BOOL = TensorProto.BOOL
    FLOAT16 = TensorProto.FLOAT16
    DOUBLE = TensorProto.DOUBLE
    UINT32 = TensorProto.UINT32
    UINT64 = TensorProto.UINT64
    COMPLEX64 = TensorProto.COMPLEX64
    COMPLEX128 = TensorProto.COMPLEX128
    BFLOAT16 = TensorProto.BFLOAT16

    @classmethod
    def from_engine_name(cls, name: str) -> "ElementType":
        """Map an engine element name (e.g. ``float``, ``int32``) to an ElementType.

        Unknown names map to UNDEFINED.
        """
        return _ENGINE_NAMES.get(name.strip(), cls.UNDEFINED)


_ENGINE_NAMES = {
    "float": ElementType.FLOAT,
    "uint8": ElementType.UINT8,
    "int8": ElementType.INT8,
    "uint16": ElementType.UINT16,
    "int16": ElementType.INT16,
    "int32": ElementType.INT32,
    "int64": ElementType.INT64,
    "string": ElementType.STRING,
    "bool": ElementType.BOOL,
    "float16": ElementType.FLOAT16,
    "double": ElementType.DOUBLE,
    "uint32": ElementType.UINT32,
    "uint64": ElementType.UINT64,
    "complex64": ElementType.COMPLEX64,
    "complex128": ElementType.COMPLEX128,
    "bfloat16": ElementType.BFLOAT16,
}


@dataclass(frozen=True)
class TypeInfo:
    """Declared type of one engine input or output.

    Attributes:
        type_name: Type string as reported by the engine.
        kind: Value kind (tensor or one of the non-tensor kinds).
        element_type: Element type for tensors, UNDEFINED otherwise.
        declared_shape: Shape as declared; dims may be ints, names or None.
        shape: Declared shape with unknown dims replaced by a concrete size.
    """

    type_name: str
    kind: ValueKind
    element_type: ElementType
    declared_shape: Tuple[Any, ...]
    shape: Tuple[int, ...]

    @property
    def is_tensor(self) -> bool:
        return self.kind == ValueKind.TENSOR

    @property
    def element_count(self) -> int:
        """Number of elements in a tensor of the resolved shape."""
        count = 1
        for dim in self.shape:
            count *= dim
        return count


def resolve_shape(
    declared_shape: Optional[Sequence[Any]], dynamic_dim_value: int = 1
) -> Tuple[int, ...]:
    """Replace symbolic, unknown or negative dimensions with ``dynamic_dim_value``."""
    if not declared_shape:
        return ()
    return tuple(
        dim if isinstance(dim, int) and dim >= 0 else dynamic_dim_value
        for dim in declared_shape
    )


def parse_type_info(
    type_name: str,
    declared_shape: Optional[Sequence[Any]] = None,
    dynamic_dim_value: int = 1,
) -> TypeInfo:
    """Build a TypeInfo from an engine type string and declared shape.

    Args:
        type_name: Engine type string, e.g. ``tensor(float)``.
        declared_shape: Declared dimensions, possibly symbolic.
        dynamic_dim_value: Size used for dimensions that are not fixed.

    Returns:
        The parsed TypeInfo.
    """
    kind = ValueKind.UNKNOWN
    element_type = ElementType.UNDEFINED

    head, sep, rest = type_name.partition("(")
    if sep and rest.endswith(")"):
        for candidate in ValueKind:
            if candidate.value == head:
                kind = candidate
                break
        if kind in (ValueKind.TENSOR, ValueKind.SPARSE_TENSOR):
            element_type = ElementType.from_engine_name(rest[:-1])

    if kind == ValueKind.TENSOR:
        shape = resolve_shape(declared_shape, dynamic_dim_value)
    else:
        shape = ()

    return TypeInfo(
        type_name=type_name,
        kind=kind,
        element_type=element_type,
        declared_shape=tuple(declared_shape or ()),
        shape=shape,
    )
