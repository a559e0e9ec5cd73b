import logging
from dataclasses import dataclass
from typing import Optional, Union

from declarationgenerator.dialect import Dialect
from declarationgenerator.model import Type, Primitive, Path, ConstPtr, Ptr, Ref, MutRef, Array, FuncPtr, \
    Function, DeclarationKind

# Translates the Type IR into C-style declarators.
# See Section 6.7, Declarations, in the C standard for background.

logger = logging.getLogger(__name__)


class DeclarationError(Exception):
    """Raised when the Type IR handed to the builder is malformed."""

    def __init__(self, message: str, typ: Optional[Union[Type, Function]] = None, dialect: Optional[Dialect] = None):
        self.type = typ
        self.dialect = dialect
        details = []
        if typ is not None:
            details.append(f"type {typ!r}")
        if dialect is not None:
            details.append(f"dialect {dialect}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


@dataclass(frozen=True)
class Declarator:

    def is_pointer_like(self) -> bool:
        return False


@dataclass(frozen=True)
class PointerDeclarator(Declarator):
    is_const: bool

    def is_pointer_like(self) -> bool:
        return True


@dataclass(frozen=True)
class ReferenceDeclarator(Declarator):

    def is_pointer_like(self) -> bool:
        return True


@dataclass(frozen=True)
class ArrayDeclarator(Declarator):
    length: str


@dataclass(frozen=True)
class FunctionDeclarator(Declarator):
    args: list[tuple[Optional[str], 'Declaration']]
    layout_vertical: bool = False

    def is_pointer_like(self) -> bool:
        return True


class Declaration:
    """A base type plus the declarators applied to it, outermost first."""
    dialect: Dialect
    qualifiers: str
    type_name: str
    generic_args: list[Type]
    kind: Optional[DeclarationKind]
    declarators: list[Declarator]

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self.qualifiers = ""
        self.type_name = ""
        self.generic_args = []
        self.kind = None
        self.declarators = []
        self.__has_base_type = False

    @staticmethod
    def from_type(typ: Type, dialect: Dialect) -> 'Declaration':
        return DeclarationBuilder(dialect).build_type(typ)

    @staticmethod
    def from_function(function: Function, layout_vertical: bool, dialect: Dialect) -> 'Declaration':
        return DeclarationBuilder(dialect).build_function(function, layout_vertical)

    def has_base_type(self) -> bool:
        return self.__has_base_type

    def set_base_type(
            self,
            typ: Type,
            name: str,
            is_const: bool,
            generic_args: Optional[list[Type]] = None,
            kind: Optional[DeclarationKind] = None
    ):
        if self.__has_base_type:
            raise DeclarationError(f"Declaration already has base type '{self.type_name}'", typ, self.dialect)
        if is_const:
            if self.qualifiers:
                raise DeclarationError("Declaration is already qualified", typ, self.dialect)
            self.qualifiers = "const"
        self.type_name = name
        self.generic_args = list(generic_args or [])
        self.kind = kind
        self.__has_base_type = True

    def push(self, declarator: Declarator):
        self.declarators.append(declarator)

    def __repr__(self) -> str:
        return f"Declaration(qualifiers={self.qualifiers!r}, kind={self.kind}, type_name={self.type_name!r}, " \
               f"generic_args={self.generic_args!r}, declarators={self.declarators!r})"


class DeclarationBuilder:
    dialect: Dialect
    additional_mappings: dict[str, str]

    def __init__(self, dialect: Dialect, additional_mappings: Optional[dict[str, str]] = None):
        self.dialect = dialect
        self.additional_mappings = dict(additional_mappings or {})

    def build(self, typ: Union[Type, Function], layout_vertical: bool = False) -> Declaration:
        if isinstance(typ, Function):
            return self.build_function(typ, layout_vertical)
        return self.build_type(typ)

    def build_type(self, typ: Type) -> Declaration:
        declaration = Declaration(self.dialect)
        self._build_type(declaration, typ, False)
        logger.debug("Built %r for %r", declaration, typ)
        return declaration

    def build_function(self, function: Function, layout_vertical: bool = False) -> Declaration:
        declaration = Declaration(self.dialect)
        args = [(argument.name, self.build_type(argument.type)) for argument in function.args]
        declaration.push(FunctionDeclarator(args, layout_vertical))
        self._build_type(declaration, function.return_type, False)
        logger.debug("Built %r for function %s", declaration, function.path)
        return declaration

    def primitive_name(self, name: str) -> str:
        mapping = self.additional_mappings.get(name)
        if mapping is not None:
            return mapping
        return self.dialect.config.primitive_name(name)

    def _build_type(self, declaration: Declaration, typ: Type, is_const: bool):
        if isinstance(typ, Path):
            if typ.generics and not self.dialect.config.supports_generics:
                raise DeclarationError("Generic arguments are not supported", typ, self.dialect)
            declaration.set_base_type(typ, typ.name, is_const, typ.generics, typ.kind)
        elif isinstance(typ, Primitive):
            declaration.set_base_type(typ, self.primitive_name(typ.name), is_const)
        elif isinstance(typ, ConstPtr):
            declaration.push(PointerDeclarator(is_const))
            self._build_type(declaration, typ.of, True)
        elif isinstance(typ, Ptr):
            declaration.push(PointerDeclarator(is_const))
            self._build_type(declaration, typ.of, False)
        elif isinstance(typ, Ref):
            declaration.push(ReferenceDeclarator())
            self._build_type(declaration, typ.of, True)
        elif isinstance(typ, MutRef):
            declaration.push(ReferenceDeclarator())
            self._build_type(declaration, typ.of, False)
        elif isinstance(typ, Array):
            declaration.push(ArrayDeclarator(typ.length))
            self._build_type(declaration, typ.of, is_const)
        elif isinstance(typ, FuncPtr):
            # A function used as a value is always a pointer to function
            args = [(argument.name, self.build_type(argument.type)) for argument in typ.args]
            declaration.push(PointerDeclarator(False))
            declaration.push(FunctionDeclarator(args, False))
            self._build_type(declaration, typ.return_type, False)
        else:
            raise DeclarationError("Unhandled type", typ, self.dialect)
