"""
Name: Action Input Schemas

Responsibilities:
  - Validate the action inputs the bot platform sends (field names as the
    platform spells them: tableName, data, conditions, query)
  - Convert them into use case inputs

Collaborators:
  - pydantic: request validation
  - application.use_cases: *Input dataclasses
"""

from pydantic import BaseModel, ConfigDict, Field

from .application.use_cases import (
    CreateTableInput,
    DeleteDataInput,
    DropTableInput,
    InsertDataInput,
    QueryDataInput,
    UpdateDataInput,
)


class _ActionReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class CreateTableReq(_ActionReq):
    table_name: str = Field(
        ..., alias="tableName", min_length=1,
        description="Name of the table to create.",
    )
    data: str = Field(
        ...,
        description="JSON Object representing the table schema.",
    )

    def to_input(self) -> CreateTableInput:
        return CreateTableInput(table_name=self.table_name, data=self.data)


class DropTableReq(_ActionReq):
    table_name: str = Field(
        ..., alias="tableName", min_length=1,
        description="Name of the table to drop.",
    )

    def to_input(self) -> DropTableInput:
        return DropTableInput(table_name=self.table_name)


class InsertDataReq(_ActionReq):
    table_name: str = Field(
        ..., alias="tableName", min_length=1,
        description="Name of the table to insert data into.",
    )
    data: str = Field(
        ...,
        description="JSON array representing the data to insert.",
    )

    def to_input(self) -> InsertDataInput:
        return InsertDataInput(table_name=self.table_name, data=self.data)


class UpdateDataReq(_ActionReq):
    table_name: str = Field(
        ..., alias="tableName", min_length=1,
        description="Name of the table to update data in.",
    )
    data: str = Field(
        ...,
        description="Stringified JSON object representing the data to update.",
    )
    conditions: str = Field(
        ...,
        description="Conditions for which rows to update, in SQL WHERE clause format.",
    )

    def to_input(self) -> UpdateDataInput:
        return UpdateDataInput(
            table_name=self.table_name, data=self.data, conditions=self.conditions
        )


class DeleteDataReq(_ActionReq):
    table_name: str = Field(
        ..., alias="tableName", min_length=1,
        description="Name of the table to delete data from.",
    )
    conditions: str = Field(
        ...,
        description="Conditions for which rows to delete, in SQL WHERE clause format.",
    )

    def to_input(self) -> DeleteDataInput:
        return DeleteDataInput(table_name=self.table_name, conditions=self.conditions)


class QueryDataReq(_ActionReq):
    query: str = Field(
        ...,
        description="SQL query to execute.",
    )

    def to_input(self) -> QueryDataInput:
        return QueryDataInput(query=self.query)
