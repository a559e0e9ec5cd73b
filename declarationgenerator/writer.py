from typing import IO, Callable, Iterable, Optional, TypeVar

from declarationgenerator.declarator import Declaration, DeclarationBuilder, PointerDeclarator, \
    ReferenceDeclarator, ArrayDeclarator, FunctionDeclarator
from declarationgenerator.dialect import Dialect
from declarationgenerator.model import Type, Function

T = TypeVar('T')


class Output:
    def write(self, text: str):
        pass

    def new_line(self):
        pass

    def close(self):
        pass


class FileOutput(Output):
    __file: IO = None

    def __init__(self, file: str):
        self.__file = open(file, "w", encoding="utf-8")

    def write(self, text: str):
        self.__file.write(text)

    def new_line(self):
        self.write("\n")

    def close(self):
        self.__file.close()


class StringOutput(Output):
    __chunks: list[str]

    def __init__(self):
        self.__chunks = []

    def write(self, text: str):
        self.__chunks.append(text)

    def new_line(self):
        self.write("\n")

    def getvalue(self) -> str:
        return "".join(self.__chunks)


class SourceOutput(Output):
    """Wraps an output and keeps track of the current line and column.

    Indentation is a stack of column widths. `indent` pushes one more level of
    `indent_width` spaces, `push_set_spaces` pushes an arbitrary column which is
    how argument lists are aligned under their opening parenthesis.
    """
    __output: Output
    indent_width: int

    def __init__(self, output: Output, indent_width: int = 4):
        self.__output = output
        self.indent_width = indent_width
        self.__spaces = [0]
        self.__line_started = False
        self.__line_length = 0
        self.__line_number = 1

    @property
    def line_number(self) -> int:
        return self.__line_number

    @property
    def line_length(self) -> int:
        return self.__line_length

    def indent(self, by: int = 1):
        self.__spaces.append(self.__spaces[-1] + by * self.indent_width)

    def deindent(self):
        self.pop_indent()

    def push_set_spaces(self, spaces: int):
        self.__spaces.append(spaces)

    def pop_indent(self):
        if len(self.__spaces) == 1:
            raise Exception("Tried to remove the base indentation")
        self.__spaces.pop()

    def line_length_for_align(self) -> int:
        if self.__line_started:
            return self.__line_length
        return self.__spaces[-1]

    def write(self, text: str):
        if not text:
            return
        if not self.__line_started:
            self._do_indent()
            self.__line_started = True
        self.__output.write(text)
        self.__line_length += len(text)

    def new_line(self):
        self.__output.new_line()
        self.__line_started = False
        self.__line_length = 0
        self.__line_number += 1

    def write_horizontal_list(self, items: Iterable[T], separator: str, write_item: Callable[[T], None]):
        for i, item in enumerate(items):
            if i != 0:
                self.write(separator)
            write_item(item)

    def close(self):
        self.__output.close()

    def _do_indent(self):
        spaces = self.__spaces[-1]
        if spaces > 0:
            self.__output.write(" " * spaces)
            self.__line_length = spaces


class DeclarationWriter:
    _POINTER = "*"
    _CONST_POINTER = "*const "
    _REFERENCE = "&"
    _ARRAY_PATTERN = "[{0}]"
    _MANAGED_ARRAY_SUFFIX = "[]"
    _VOID_PARAMETERS = "void"
    _GENERICS_START = "<"
    _GENERICS_END = ">"
    _LIST_SEPARATOR = ", "

    _builder: DeclarationBuilder = None

    def __init__(self, builder: DeclarationBuilder):
        self._builder = builder

    def write(
            self,
            declaration: Declaration,
            output: SourceOutput,
            identifier: Optional[str] = None,
            void_prototype: bool = False
    ):
        config = declaration.dialect.config
        managed_array_length = self._managed_array_length(declaration)

        if managed_array_length is not None:
            output.write(config.array_attribute_pattern.format(managed_array_length))

        # Type-qualifier and type-specifier first
        if declaration.qualifiers:
            output.write(f"{declaration.qualifiers} ")
        if declaration.kind is not None:
            output.write(f"{declaration.kind.to_str()} ")
        output.write(declaration.type_name)
        if managed_array_length is not None:
            output.write(self._MANAGED_ARRAY_SUFFIX)

        if declaration.generic_args:
            output.write(self._GENERICS_START)
            output.write_horizontal_list(declaration.generic_args, self._LIST_SEPARATOR,
                                         lambda generic: self.write_type(generic, output))
            output.write(self._GENERICS_END)

        if identifier is not None:
            output.write(" ")

        self._write_left(declaration, output)

        if identifier is not None:
            output.write(identifier)

        self._write_right(declaration, output, void_prototype)

    def write_type(self, typ: Type, output: SourceOutput):
        self.write(self._builder.build_type(typ), output)

    def write_field(self, typ: Type, identifier: str, output: SourceOutput):
        self.write(self._builder.build_type(typ), output, identifier)

    def write_function(self, function: Function, output: SourceOutput, layout_vertical: bool = False,
                       void_prototype: bool = False):
        declaration = self._builder.build_function(function, layout_vertical)
        self.write(declaration, output, function.name, void_prototype)

    @staticmethod
    def _managed_array_length(declaration: Declaration) -> Optional[str]:
        if not declaration.dialect.config.marshal_fixed_arrays or len(declaration.declarators) != 1:
            return None
        declarator = declaration.declarators[0]
        if isinstance(declarator, ArrayDeclarator):
            return declarator.length
        return None

    def _write_left(self, declaration: Declaration, output: SourceOutput):
        declarators = list(reversed(declaration.declarators))
        for i, declarator in enumerate(declarators):
            next_is_pointer = i + 1 < len(declarators) and declarators[i + 1].is_pointer_like()

            if isinstance(declarator, PointerDeclarator):
                output.write(self._CONST_POINTER if declarator.is_const else self._POINTER)
            elif isinstance(declarator, ReferenceDeclarator):
                output.write(self._REFERENCE)
            elif isinstance(declarator, ArrayDeclarator) or isinstance(declarator, FunctionDeclarator):
                if next_is_pointer:
                    output.write("(")
            else:
                raise Exception(f"Unhandled declarator {declarator}")

    def _write_right(self, declaration: Declaration, output: SourceOutput, void_prototype: bool):
        config = declaration.dialect.config
        last_was_pointer = False

        for declarator in declaration.declarators:
            if isinstance(declarator, PointerDeclarator) or isinstance(declarator, ReferenceDeclarator):
                last_was_pointer = True
            elif isinstance(declarator, ArrayDeclarator):
                if last_was_pointer:
                    output.write(")")
                if not config.marshal_fixed_arrays:
                    output.write(self._ARRAY_PATTERN.format(declarator.length))
                last_was_pointer = False
            elif isinstance(declarator, FunctionDeclarator):
                if last_was_pointer:
                    output.write(")")
                output.write("(")
                if not declarator.args and void_prototype and config.explicit_void:
                    output.write(self._VOID_PARAMETERS)
                if declarator.layout_vertical:
                    self._write_vertical_args(declarator, output, void_prototype)
                else:
                    output.write_horizontal_list(
                        declarator.args,
                        self._LIST_SEPARATOR,
                        lambda arg: self.write(arg[1], output, arg[0], void_prototype)
                    )
                output.write(")")
                last_was_pointer = True
            else:
                raise Exception(f"Unhandled declarator {declarator}")

    def _write_vertical_args(self, declarator: FunctionDeclarator, output: SourceOutput, void_prototype: bool):
        output.push_set_spaces(output.line_length_for_align())
        for i, (arg_identifier, arg_declaration) in enumerate(declarator.args):
            if i != 0:
                output.write(",")
                output.new_line()
            self.write(arg_declaration, output, arg_identifier, void_prototype)
        output.pop_indent()


def write_func(
        output: SourceOutput,
        function: Function,
        layout_vertical: bool,
        void_prototype: bool,
        dialect: Dialect
):
    DeclarationWriter(DeclarationBuilder(dialect)).write_function(function, output, layout_vertical, void_prototype)


def write_field(output: SourceOutput, typ: Type, identifier: str, dialect: Dialect):
    DeclarationWriter(DeclarationBuilder(dialect)).write_field(typ, identifier, output)


def write_type(output: SourceOutput, typ: Type, dialect: Dialect):
    DeclarationWriter(DeclarationBuilder(dialect)).write_type(typ, output)


def render_func(function: Function, dialect: Dialect, layout_vertical: bool = False,
                void_prototype: bool = False) -> str:
    output = StringOutput()
    write_func(SourceOutput(output), function, layout_vertical, void_prototype, dialect)
    return output.getvalue()


def render_field(typ: Type, identifier: str, dialect: Dialect) -> str:
    output = StringOutput()
    write_field(SourceOutput(output), typ, identifier, dialect)
    return output.getvalue()


def render_type(typ: Type, dialect: Dialect) -> str:
    output = StringOutput()
    write_type(SourceOutput(output), typ, dialect)
    return output.getvalue()
