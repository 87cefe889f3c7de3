from .create_table import CreateTableInput, CreateTableUseCase
from .delete_data import DeleteDataInput, DeleteDataUseCase
from .drop_table import DropTableInput, DropTableUseCase
from .insert_data import InsertDataInput, InsertDataUseCase
from .query_data import QueryDataInput, QueryDataUseCase
from .sql_action import SqlActionUseCase
from .update_data import UpdateDataInput, UpdateDataUseCase

__all__ = [
    "SqlActionUseCase",
    "CreateTableInput",
    "CreateTableUseCase",
    "DropTableInput",
    "DropTableUseCase",
    "InsertDataInput",
    "InsertDataUseCase",
    "UpdateDataInput",
    "UpdateDataUseCase",
    "DeleteDataInput",
    "DeleteDataUseCase",
    "QueryDataInput",
    "QueryDataUseCase",
]
