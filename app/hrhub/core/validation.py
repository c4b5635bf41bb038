from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.hrhub.core.error_catalog import bad_request

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_issues(exc: ValidationError) -> list[dict]:
    issues = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or None
        issues.append(
            {
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            }
        )
    return issues


def parse_model(model: Type[ModelT], data: dict) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise bad_request(details={"issues": format_issues(exc)}) from exc


def query_model(model: Type[ModelT]):
    """Dependency parsing the query string into ``model``.

    Repeated keys keep their last value; keys the model does not declare are
    ignored.
    """

    def dependency(request: Request) -> ModelT:
        return parse_model(model, dict(request.query_params))

    return dependency
