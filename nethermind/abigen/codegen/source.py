from dataclasses import dataclass, field

INDENT = "    "


def indent_lines(lines: list[str], depth: int = 1) -> list[str]:
    """Indents every non-empty line by ``depth`` levels"""
    return [INDENT * depth + line if line else "" for line in lines]


def quoted_list(values: list[str]) -> str:
    """
    Renders a list of strings as a Python list literal

    >>> quoted_list(["address", "uint256"])
    '["address", "uint256"]'
    """
    return "[" + ", ".join(f'"{value}"' for value in values) + "]"


@dataclass(frozen=True)
class ParameterSpec:
    """Parameter of a generated method"""

    name: str
    hint: str | None = None

    def render(self) -> str:
        if self.hint is None:
            return self.name
        return f"{self.name}: {self.hint}"


@dataclass
class MethodSpec:
    """Method of a generated class.  Body lines are relative to the body indentation"""

    name: str
    parameters: list[ParameterSpec] = field(default_factory=list)
    return_hint: str | None = None
    body: list[str] = field(default_factory=list)
    docstring: str | None = None
    decorators: list[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        params = ", ".join(["self"] + [param.render() for param in self.parameters])
        if self.return_hint is None:
            return f"def {self.name}({params}):"
        return f"def {self.name}({params}) -> {self.return_hint}:"

    def render(self, depth: int = 0) -> str:
        lines = [f"@{decorator}" for decorator in self.decorators]
        lines.append(self.signature)
        if self.docstring:
            lines.append(f'{INDENT}"""{self.docstring}"""')
        lines.extend(indent_lines(self.body or ["pass"]))
        return "\n".join(indent_lines(lines, depth)) + "\n"


@dataclass(frozen=True)
class FieldSpec:
    """Class attribute or dataclass field of a generated class"""

    name: str
    value: str | None = None
    hint: str | None = None

    def render(self, depth: int = 0) -> str:
        declaration = self.name if self.hint is None else f"{self.name}: {self.hint}"
        if self.value is not None:
            declaration += f" = {self.value}"
        return INDENT * depth + declaration + "\n"


@dataclass
class ClassSpec:
    """Generated class definition"""

    name: str
    bases: list[str] = field(default_factory=list)
    docstring: str | None = None
    decorators: list[str] = field(default_factory=list)
    fields: list[FieldSpec] = field(default_factory=list)
    methods: list[MethodSpec] = field(default_factory=list)

    def render(self, depth: int = 0) -> str:
        pad = INDENT * depth
        header = f"class {self.name}({', '.join(self.bases)}):" if self.bases else f"class {self.name}:"
        out = "".join(f"{pad}@{decorator}\n" for decorator in self.decorators) + pad + header + "\n"

        sections = []
        if self.docstring:
            sections.append(f'{pad}{INDENT}"""{self.docstring}"""\n')
        if self.fields:
            sections.append("".join(f.render(depth + 1) for f in self.fields))
        sections.extend(method.render(depth + 1) for method in self.methods)

        if not sections:
            return out + f"{pad}{INDENT}pass\n"
        return out + "\n".join(sections)
