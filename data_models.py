import re
import json
from enum import Enum
from typing import List, Optional, Any, Dict
from pydantic import BaseModel, model_validator


FORBIDDEN_SQL_PATTERNS = [
    r'(?i)\binsert\s+into\b',
    r'(?i)\bdelete\s+from\b',
    r'(?i)\bupdate\s+\w+\s+set\b',
    r'(?i)\bdrop\s+(table|view|schema|index)\b',
    r'(?i)\balter\s+table\b',
    r'(?i)\bcreate\s+(table|view|schema|index)\b',
    r'(?i)\btruncate\b',
    r'(?i)\bgrant\b',
]

STRING_LITERAL = re.compile(r"'(?:[^']|'')*'")


class QueryLevel(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    ADVANCED = "advanced"


class DataColumnModel(BaseModel):
    name: str
    description: str
    data_type: str
    examples: Optional[List[Any]] = None

class DataTableModel(BaseModel):
    name: str
    columns: List[DataColumnModel]

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

class DataDictionaryModel(BaseModel):
    database: str
    tables: List[DataTableModel]
    notes: Optional[List[str]]

    def get_table(self, name: str) -> Optional[DataTableModel]:
        for table in self.tables:
            if table.name.lower() == name.lower():
                return table
        return None

    def as_text(self) -> str:
        """
        One block per table listing columns with types, descriptions and
        example values, followed by the notes.
        """
        lines = []
        for table in self.tables:
            lines += ["", f"Table: {table.name}"]
            for column in table.columns:
                entry = f"  - {column.name} ({column.data_type})"
                if column.description:
                    entry += f": {column.description}"
                if column.examples:
                    entry += " (e.g., " + ", ".join(str(v) for v in column.examples) + ")"
                lines.append(entry)
        if self.notes:
            lines += ["", "Notes:"] + [f"- {note}" for note in self.notes]
        return "\n".join(lines) + "\n"


class QuerySpecModel(BaseModel):
    name: str
    level: QueryLevel
    question: str
    sql: str
    single_row: bool = False
    alternative_of: Optional[str] = None

    @model_validator(mode='after')
    def check_read_only(self) -> "QuerySpecModel":
        statement = self.sql.strip().rstrip(";").strip()
        if not statement:
            raise ValueError(f'[{self.name}] SQL is empty')
        # Keywords and semicolons inside string literals are data, not SQL
        bare = STRING_LITERAL.sub("''", statement)
        if ";" in bare:
            raise ValueError(f'[{self.name}] Only a single statement is allowed')
        first_word = bare.split(None, 1)[0].upper()
        if first_word not in ("SELECT", "WITH"):
            raise ValueError(f'[{self.name}] Query must start with SELECT or WITH, got {first_word}')
        for pattern in FORBIDDEN_SQL_PATTERNS:
            if re.search(pattern, bare):
                raise ValueError(f'[{self.name}] Query is not read-only: matches {pattern}')
        return self


class QueryResultModel(BaseModel):
    name: str
    question: str
    sql: str
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int
    elapsed: float = 0.0
    max_rows: int = 30

    def as_text(self, max_rows: Optional[int] = None) -> str:
        """
        JSON rendering of the rows, cut at max_rows with a trailing marker.
        Falls back to the limit the report was built with.
        """
        limit = self.max_rows if max_rows is None else max_rows
        shown = json.dumps(self.rows[:limit], indent=2, default=str)
        if self.row_count > limit:
            shown += f"\n... [truncated: showing first {limit} of {self.row_count} rows]"
        return shown
