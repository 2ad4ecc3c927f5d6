"""Target language syntax for generated constant classes.

Every literal of the generated language lives here, so the schema and naming
logic never depends on the output syntax.
"""

INDENT = "    "


class PhpDialect:
    """PHP 8 syntax: final classes with public string constants"""

    name = "php"
    file_extension = ".php"

    # PHP 7+ accepts any keyword as a class constant name except "class"
    reserved_words: frozenset[str] = frozenset({"class"})

    def open_tag(self) -> str:
        return "<?php\n\n"

    def namespace(self, namespace: str) -> str:
        """Namespace declaration, or nothing for the global namespace"""
        namespace = namespace.strip().strip("\\")
        return f"namespace {namespace};\n\n" if namespace else ""

    def file_name(self, class_name: str) -> str:
        return f"{class_name}{self.file_extension}"

    def quote(self, value: str) -> str:
        """Single-quoted string literal; only backslash and quote need escaping"""
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"

    def class_open(self, class_name: str, doc: str | None = None) -> str:
        prefix = f"{self.doc_comment(doc)}\n" if doc else ""
        return f"{prefix}final class {class_name}\n{{\n"

    def class_close(self) -> str:
        return "}\n"

    def constant(self, name: str, value: str, doc: str | None = None) -> str:
        prefix = f"{INDENT}{self.doc_comment(doc)}\n" if doc else ""
        return f"{prefix}{INDENT}public const {name} = {self.quote(value)};\n"

    def comment(self, text: str, indent: bool = True) -> str:
        return f"{INDENT if indent else ''}// {text}\n"

    def doc_comment(self, text: str) -> str:
        text = text.replace("*/", "* /")
        return f"/** {text} */"

    def doc_block(self, lines: list[str]) -> str:
        """Multi-line doc block used for file headers"""
        body = "".join(f" * {line}".rstrip() + "\n" for line in lines)
        return f"/**\n{body} */\n\n"

    def end_of_file(self) -> str:
        return "// end of auto-generated file\n"
