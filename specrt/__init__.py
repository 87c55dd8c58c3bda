"""
specrt - Specification Runtime
Value and control-flow primitives for executable formal semantics.

Values:   unbounded integers, a bit-exact fixed-width byte codec, Size/Align
Storage:  copy-on-write SharedCell and the persistent Map, List and Set
Control:  ChoiceValue/ChoiceResult with short-circuit propagation, and the
          bounded rejection sampler behind `pick`
"""

__version__ = "0.3.0"

from specrt.errors import (
    ContractViolation,
    MissingEntry,
    IndexOutOfBounds,
    PickTimeout,
    Unimplemented,
)
from specrt.kinds import (
    Signedness,
    Endianness,
    Mutability,
    Signed,
    Unsigned,
    BigEndian,
    LittleEndian,
    Mutable,
    Immutable,
)
from specrt.size import Size, Align
from specrt.integer import Int, in_bounds, try_narrow
from specrt.codec import ByteCodec, BIG_ENDIAN_CODEC, LITTLE_ENDIAN_CODEC, encode, decode
from specrt.cell import SharedCell
from specrt.containers import (
    PersistentMap,
    PersistentList,
    PersistentSet,
    Conflict,
    map_of,
    list_of,
    set_of,
    repeat,
)
from specrt.result import (
    Ok,
    Err,
    ChoiceValue,
    ChoiceResult,
    ChoiceOk,
    ChoiceErr,
    propagate,
    fail,
    choice_fn,
    collect_choice,
)
from specrt.nondet import (
    Distribution,
    Constant,
    UniformInt,
    Choose,
    SamplerConfig,
    ChoiceSampler,
    pick,
    predict,
)

__all__ = [
    "ContractViolation",
    "MissingEntry",
    "IndexOutOfBounds",
    "PickTimeout",
    "Unimplemented",
    "Signedness",
    "Endianness",
    "Mutability",
    "Signed",
    "Unsigned",
    "BigEndian",
    "LittleEndian",
    "Mutable",
    "Immutable",
    "Size",
    "Align",
    "Int",
    "in_bounds",
    "try_narrow",
    "ByteCodec",
    "encode",
    "decode",
    "SharedCell",
    "PersistentMap",
    "PersistentList",
    "PersistentSet",
    "Conflict",
    "map_of",
    "list_of",
    "set_of",
    "repeat",
    "Ok",
    "Err",
    "ChoiceValue",
    "ChoiceResult",
    "ChoiceOk",
    "ChoiceErr",
    "propagate",
    "fail",
    "choice_fn",
    "collect_choice",
    "Distribution",
    "Constant",
    "UniformInt",
    "Choose",
    "SamplerConfig",
    "ChoiceSampler",
    "pick",
    "predict",
]
