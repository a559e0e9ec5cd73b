import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from pycparser import c_ast, c_parser
from pycparser.c_ast import Node, Decl, TypeDecl, IdentifierType, PtrDecl, ArrayDecl, Constant, ID, ParamList, \
    Typename, FuncDecl, FileAST, EllipsisParam

from astparser import builtin_typedef_names
from declarationgenerator import primitive_names
from declarationgenerator.model import Type, Primitive, Path, ConstPtr, Ptr, Array, FuncPtr, Function, \
    FunctionArgument, DeclarationKind

logger = logging.getLogger(__name__)

_PROBE_FUNCTION_NAME = "__declaration_probe"


class DeclarationParseError(Exception):
    pass


@dataclass(frozen=True)
class ParsedDeclaration:
    name: Optional[str]
    declared: Union[Type, Function]


def _is_constant(node: Node) -> bool:
    return "const" in node.quals


def _parse_array_dimension(array_dimension: Node) -> str:
    if isinstance(array_dimension, Constant):
        return array_dimension.value
    elif isinstance(array_dimension, ID):
        return array_dimension.name
    raise DeclarationParseError(f"Expected Constant or ID as array dimension but got {type(array_dimension)}")


def _parse_named_type(node: Node) -> Type:
    if isinstance(node, IdentifierType):
        name = " ".join(node.names)
        if name in primitive_names:
            return Primitive(name)
        return Path(name)
    elif isinstance(node, c_ast.Struct):
        return Path(node.name, kind=DeclarationKind.STRUCT)
    elif isinstance(node, c_ast.Union):
        return Path(node.name, kind=DeclarationKind.UNION)
    elif isinstance(node, c_ast.Enum):
        return Path(node.name, kind=DeclarationKind.ENUM)
    raise DeclarationParseError(f"Unexpected type specifier {type(node)}")


def _parse_type(node: Node) -> tuple[Type, bool]:
    """Returns the type of `node` and whether the node itself is const qualified."""
    if isinstance(node, TypeDecl):
        return _parse_named_type(node.type), _is_constant(node)
    elif isinstance(node, PtrDecl):
        if isinstance(node.type, FuncDecl):
            return _parse_function_pointer(node.type), _is_constant(node)
        pointee, pointee_is_constant = _parse_type(node.type)
        if pointee_is_constant:
            return ConstPtr(pointee), _is_constant(node)
        return Ptr(pointee), _is_constant(node)
    elif isinstance(node, ArrayDecl):
        # Constness of the elements belongs to whatever points at the array
        element, element_is_constant = _parse_type(node.type)
        return Array(element, _parse_array_dimension(node.dim)), element_is_constant
    else:
        raise DeclarationParseError(f"Unexpected type {type(node)} {node}")


def _parse_unqualified_type(node: Node) -> Type:
    typ, is_constant = _parse_type(node)
    if is_constant:
        raise DeclarationParseError(f"Top level const qualifier on {typ} has no counterpart in the type model")
    return typ


def _parse_parameters(function: FuncDecl) -> list[FunctionArgument]:
    if function.args is None:
        return []
    if not isinstance(function.args, ParamList):
        raise DeclarationParseError(f"Unexpected type for function arguments {type(function.args)}")

    parameters = function.args.params
    if len(parameters) == 1 and isinstance(parameters[0], Typename) and _is_void(parameters[0].type):
        return []

    arguments: list[FunctionArgument] = []
    for parameter in parameters:
        if isinstance(parameter, EllipsisParam):
            raise DeclarationParseError("Variadic parameters have no counterpart in the type model")
        elif isinstance(parameter, Typename) or isinstance(parameter, Decl):
            arguments.append(FunctionArgument(name=parameter.name, type=_parse_unqualified_type(parameter.type)))
        else:
            raise DeclarationParseError(f"Unexpected type for parameter in parameter list {parameter}")
    return arguments


def _is_void(node: Node) -> bool:
    return isinstance(node, TypeDecl) and isinstance(node.type, IdentifierType) and node.type.names == ["void"]


def _parse_function_pointer(function: FuncDecl) -> FuncPtr:
    return FuncPtr(
        return_type=_parse_unqualified_type(function.type),
        args=_parse_parameters(function)
    )


class DeclarationParser:
    """Reads C declarations back into the type model.

    Used to check that rendered C text declares what it was rendered from. Any
    type name that is not a C keyword has to be announced as a typedef name.
    """
    typedef_names: set[str]

    def __init__(self, typedef_names: Iterable[str] = ()):
        self.typedef_names = set(typedef_names) | builtin_typedef_names

    def parse_declaration(self, text: str) -> ParsedDeclaration:
        declaration = self._parse_last_declaration(f"{text};")
        if isinstance(declaration.type, FuncDecl):
            function = declaration.type
            return ParsedDeclaration(declaration.name, Function(
                path=declaration.name,
                args=_parse_parameters(function),
                return_type=_parse_unqualified_type(function.type)
            ))
        return ParsedDeclaration(declaration.name, _parse_unqualified_type(declaration.type))

    def parse_type(self, text: str) -> Type:
        # An abstract declarator is only valid in a few places, a parameter list is one of them
        declaration = self._parse_last_declaration(f"void {_PROBE_FUNCTION_NAME}({text});")
        arguments = _parse_parameters(declaration.type)
        if len(arguments) != 1:
            raise DeclarationParseError(f"Expected exactly one type in {text!r}")
        return arguments[0].type

    def _parse_last_declaration(self, source: str) -> Decl:
        logger.debug("Parsing %r", source)
        preamble = "".join(f"typedef int {name};\n" for name in sorted(self.typedef_names))
        try:
            ast: FileAST = c_parser.CParser().parse(preamble + source, filename="<declaration>")
        except c_parser.ParseError as error:
            raise DeclarationParseError(f"Could not parse {source!r}: {error}") from error

        declaration = ast.ext[-1]
        if not isinstance(declaration, Decl):
            raise DeclarationParseError(f"Expected Decl but got {type(declaration)}")
        return declaration
