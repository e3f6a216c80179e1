from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.deps import UserContext


@dataclass(frozen=True)
class ActionContext:
    db: Session
    params: Mapping[str, Any] = field(default_factory=dict)
    user: UserContext | None = None
    body: Any = None

    def require_user(self) -> UserContext:
        if self.user is None:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return self.user


ActionHandler = Callable[[ActionContext], Any]


@dataclass(frozen=True)
class Action:
    handler: ActionHandler
    requires_user: bool = True


def dispatch(actions: Mapping[str, Action], name: str | None, ctx: ActionContext, *, default: str | None = None) -> Any:
    key = str(name or "").strip() or default
    action = actions.get(key) if key else None
    if action is None:
        raise HTTPException(status_code=400, detail="Invalid action")
    if action.requires_user:
        ctx.require_user()
    return action.handler(ctx)
