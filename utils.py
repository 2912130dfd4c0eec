from typing import Dict, List
from sqlalchemy import inspect, text
from data_models import DataDictionaryModel, DataTableModel, DataColumnModel


# Substrings of a reflected column type, checked in order
EXAMPLE_CONVERTERS = [
    (("int",), int),
    (("float", "double", "real", "numeric", "decimal"), float),
]


def get_clean_examples(col_type, ex_values):
    """
    Convert sampled values to int or float for numeric columns and to str
    otherwise. Values that do not convert are skipped.
    """
    base_type = str(col_type).lower()
    convert = next(
        (fn for markers, fn in EXAMPLE_CONVERTERS if any(m in base_type for m in markers)),
        str,
    )
    clean_values = []
    for value in ex_values:
        if value is None:
            continue
        try:
            clean_values.append(convert(value))
        except (TypeError, ValueError):
            pass
    return clean_values or None


def extract_data_dictionary(engine, db_label="Database", sample_rows=3, tables=None):
    """
    Describe the tables of the store, with a few example values per column.
    When ``tables`` is given only those tables are read.
    """
    inspector = inspect(engine)
    table_names = inspector.get_table_names()
    if tables is not None:
        wanted = {t.lower() for t in tables}
        table_names = [t for t in table_names if t.lower() in wanted]
    result = []
    with engine.connect() as conn:
        for table_name in table_names:
            columns = []
            example_rows = conn.execute(
                text(f'SELECT * FROM "{table_name}" LIMIT {int(sample_rows)}')
            ).fetchall()
            for col in inspector.get_columns(table_name):
                col_name = col['name']
                ex_values = [row._mapping.get(col_name) for row in example_rows if col_name in row._mapping]
                clean_examples = get_clean_examples(col['type'], ex_values)
                columns.append(DataColumnModel(
                    name=col_name,
                    description=col.get('comment', "") or "",
                    data_type=str(col['type']),
                    examples=clean_examples
                ))
            result.append(DataTableModel(name=table_name, columns=columns))
    return DataDictionaryModel(database=db_label, tables=result, notes=None)


def find_schema_gaps(data_dictionary: DataDictionaryModel, required: Dict[str, List[str]]) -> List[str]:
    """
    List every required table.column absent from the data dictionary.
    A missing table is reported once per required column.
    """
    missing = []
    for table_name, column_names in required.items():
        table = data_dictionary.get_table(table_name)
        present = {c.lower() for c in table.column_names()} if table else set()
        for column_name in column_names:
            if column_name.lower() not in present:
                missing.append(f"{table_name}.{column_name}")
    return missing
