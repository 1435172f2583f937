from __future__ import annotations

from dofire.domain.result import Ok, Result, err
from dofire.models import Profile
from dofire.schemas.profile import CreateProfileCommand, UpdateProfileCommand
from dofire.storage import ConflictError, ConstraintViolationError, Repository


def get_profile(repo: Repository, user_id: str) -> Result[Profile]:
    profile = repo.get_profile(user_id)
    if profile is None:
        return err("not_found", "Profile not found")
    return Ok(profile)


def create_profile(repo: Repository, user_id: str, command: CreateProfileCommand) -> Result[Profile]:
    try:
        profile = repo.create_profile(user_id, command)
    except ConflictError:
        return err("conflict", "Profile already exists")
    except ConstraintViolationError as exc:
        fields = {exc.field: "constraint_violation"} if exc.field else None
        return err("bad_request", "Validation failed", fields)
    return Ok(profile)


def update_profile(repo: Repository, user_id: str, command: UpdateProfileCommand) -> Result[Profile]:
    try:
        profile = repo.update_profile(user_id, command.changes())
    except ConstraintViolationError as exc:
        fields = {exc.field: "constraint_violation"} if exc.field else None
        return err("bad_request", "Validation failed", fields)
    if profile is None:
        return err("not_found", "Profile not found")
    return Ok(profile)
