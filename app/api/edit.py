"""
Edit endpoints.

Apply declarative changes to a posted document and return the edited
copy with its comments. Nothing is persisted.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from src.object_updater import (
    ChangeRequest,
    CommentRecord,
    PathNotWritable,
    UnsupportedKeyKind,
    apply_changes,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class EditRequest(BaseModel):
    """Request body for applying changes to a document."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "document": {
                    "spec": {
                        "tolerations": [
                            {"effect": "NoSchedule", "operator": "Exists"}
                        ]
                    }
                },
                "changes": [
                    {
                        "path": "/spec",
                        "value": {
                            "tolerations": [
                                {"effect": "NoSchedule", "operator": "Exists"},
                                {"effect": "NoExecute", "operator": "Exists"}
                            ]
                        },
                        "instructions": [
                            {"prop": "tolerations", "merge_by_contents": True}
                        ],
                        "comment": {"text": "Tolerate all taints", "direction": "right"}
                    }
                ]
            }
        }
    )

    document: Any = Field(
        ...,
        description="The document to edit"
    )
    changes: list[ChangeRequest] = Field(
        default_factory=list,
        description="Changes to apply in order"
    )


class EditResponse(BaseModel):
    """Response for an applied edit."""

    success: bool = Field(description="Whether all changes were applied")
    changes_applied: int = Field(description="Number of changes applied")
    result: Any = Field(description="The edited document")
    comments: list[CommentRecord] = Field(
        default_factory=list,
        description="Comments recorded by the changes"
    )


@router.post("/edit", response_model=EditResponse)
async def edit_document(request: EditRequest) -> EditResponse:
    """
    Apply changes to a document.

    Each change merges its value into the document at its path using the
    given merge instructions. The posted document is returned edited;
    comments are listed in the order the changes were given.
    """
    if len(request.changes) > settings.max_changes:
        logger.error("Too many changes | count=%d max=%d", len(request.changes), settings.max_changes)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "too_many_changes",
                "message": f"At most {settings.max_changes} changes per request",
            },
        )

    logger.info("Applying edit | changes=%d", len(request.changes))

    try:
        edit = apply_changes(request.document, request.changes)
    except UnsupportedKeyKind as e:
        logger.error("Unsupported key: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "unsupported_key", "message": str(e)},
        )
    except PathNotWritable as e:
        logger.error("Invalid path: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "invalid_path", "message": str(e)},
        )
    except Exception as e:
        logger.exception("Edit error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "edit_error", "message": str(e)},
        )

    logger.info("Edit complete | comments=%d", len(edit.comments))

    return EditResponse(
        success=True,
        changes_applied=len(request.changes),
        result=edit.result,
        comments=edit.comments,
    )
