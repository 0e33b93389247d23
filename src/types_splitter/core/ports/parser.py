from typing import Protocol

from types_splitter.models import Definition


class SchemaParser(Protocol):
    def parse(self, name: str, text: str) -> list[Definition]: ...
