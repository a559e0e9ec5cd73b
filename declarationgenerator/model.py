from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DeclarationKind(Enum):
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"

    def to_str(self) -> str:
        return self.value


@dataclass(frozen=True)
class Type:
    pass


@dataclass(frozen=True)
class Primitive(Type):
    name: str


@dataclass(frozen=True)
class Path(Type):
    name: str
    generics: list[Type] = field(default_factory=list)
    kind: Optional[DeclarationKind] = None


@dataclass(frozen=True)
class ConstPtr(Type):
    of: Type


@dataclass(frozen=True)
class Ptr(Type):
    of: Type


@dataclass(frozen=True)
class Ref(Type):
    of: Type


@dataclass(frozen=True)
class MutRef(Type):
    of: Type


@dataclass(frozen=True)
class Array(Type):
    of: Type
    length: str


@dataclass(frozen=True)
class FunctionArgument:
    name: Optional[str]
    type: Type


@dataclass(frozen=True)
class FuncPtr(Type):
    return_type: Type
    args: list[FunctionArgument]


@dataclass(frozen=True)
class Function:
    path: str
    args: list[FunctionArgument]
    return_type: Type

    @property
    def name(self) -> str:
        return self.path.split("::")[-1]



def get_base_types(typ: Type) -> list[Type]:
    if isinstance(typ, Primitive):
        return [typ]
    elif isinstance(typ, Path):
        return [typ] + [base for generic in typ.generics for base in get_base_types(generic)]
    elif isinstance(typ, (ConstPtr, Ptr, Ref, MutRef, Array)):
        return get_base_types(typ.of)
    elif isinstance(typ, FuncPtr):
        types = [base for argument in typ.args for base in get_base_types(argument.type)]
        types += get_base_types(typ.return_type)
        return types
    else:
        raise Exception(f"Unsupported type {typ}")
