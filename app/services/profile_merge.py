"""Merge a multipart profile-update request into the fields to persist.

The update can carry, in any combination: scalar profile fields, one education
and/or experience entry to append, an index of each to remove, full replacement
lists for both, a new profile image, and per-entry education logos submitted as
``education[N][logo]``.

Order of application for each nested list:

1. start from the stored list;
2. append the new entry, if any;
3. remove the entry at the given index, if it is in range (out of range is a no-op);
4. if a full list was submitted, it replaces the result of 2-3 (last writer wins).

Education logos are then resolved per final index: an uploaded file for that index
wins. When a full list was submitted, an entry without an upload takes the stored
entry's logo at the same index; entries kept from the stored list by steps 2-3
already carry their own logo and are left as they are.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.schemas.profile import SCALAR_PROFILE_FIELDS, EducationEntry, ExperienceEntry, Profile
from app.services.media_uploader import EDUCATION_LOGO, PROFILE_IMAGE, MediaFile, MediaUploader, UploadTask, upload_all


logger = logging.getLogger(__name__)

EDUCATION_LOGO_FIELD = re.compile(r"^education\[(\d+)\]\[logo\]$")
IMAGE_FIELD = "image"

EntryT = TypeVar("EntryT", bound=BaseModel)


@dataclass
class ProfileUpdatePayload:
    scalars: dict[str, str] = field(default_factory=dict)
    new_education: EducationEntry | None = None
    remove_education_index: int | None = None
    new_experience: ExperienceEntry | None = None
    remove_experience_index: int | None = None
    education: list[EducationEntry] | None = None
    experience: list[ExperienceEntry] | None = None
    image: MediaFile | None = None
    education_logos: dict[int, MediaFile] = field(default_factory=dict)

    @property
    def touches_education(self) -> bool:
        return (
            self.new_education is not None
            or self.remove_education_index is not None
            or self.education is not None
            or bool(self.education_logos)
        )

    @property
    def touches_experience(self) -> bool:
        return self.new_experience is not None or self.remove_experience_index is not None or self.experience is not None

    def media_files(self) -> list[MediaFile]:
        files = [self.image] if self.image is not None else []
        files.extend(self.education_logos[index] for index in sorted(self.education_logos))
        return files


def _load_json(name: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed {name}: {exc.msg}") from exc


def _parse_entry(name: str, raw: str | None, model: type[EntryT]) -> EntryT | None:
    if raw is None or not raw.strip():
        return None
    value = _load_json(name, raw)
    if not isinstance(value, dict):
        raise ValidationError(f"Malformed {name}: expected a JSON object")
    try:
        return model.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(f"Malformed {name}: {exc.errors()[0]['msg']}") from exc


def _parse_entry_list(name: str, raw: str | None, model: type[EntryT]) -> list[EntryT] | None:
    if raw is None or not raw.strip():
        return None
    value = _load_json(name, raw)
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValidationError(f"Malformed {name}: expected a JSON array of objects")
    try:
        return [model.model_validate(item) for item in value]
    except PydanticValidationError as exc:
        raise ValidationError(f"Malformed {name}: {exc.errors()[0]['msg']}") from exc


def coerce_index(raw: Any) -> int:
    """Read a client-supplied list index: an int, or a number/numeric string with no fractional part.

    Raises ValueError for anything else, including booleans and "1.5".
    """
    if isinstance(raw, bool):
        raise ValueError(f"not an index: {raw!r}")
    if isinstance(raw, int):
        return raw
    value = float(str(raw).strip())
    if not value.is_integer():
        raise ValueError(f"not an index: {raw!r}")
    return int(value)


def _parse_index(name: str, raw: str | None) -> int | None:
    if raw is None or not str(raw).strip():
        return None
    try:
        return coerce_index(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}") from exc


def parse_profile_update(fields: Mapping[str, str], files: Mapping[str, MediaFile]) -> ProfileUpdatePayload:
    """Build the payload from form text fields and uploaded files.

    Everything is parsed and validated here, so a malformed request fails before
    any upload is attempted.
    """
    logos: dict[int, MediaFile] = {}
    for key, media in files.items():
        match = EDUCATION_LOGO_FIELD.match(key)
        if match:
            logos[int(match.group(1))] = media
        elif key != IMAGE_FIELD:
            logger.debug("ignoring unexpected file field %s", key)

    return ProfileUpdatePayload(
        scalars={name: fields[name] for name in SCALAR_PROFILE_FIELDS if name in fields},
        new_education=_parse_entry("newEducation", fields.get("newEducation"), EducationEntry),
        remove_education_index=_parse_index("removeEducationIndex", fields.get("removeEducationIndex")),
        new_experience=_parse_entry("newExperience", fields.get("newExperience"), ExperienceEntry),
        remove_experience_index=_parse_index("removeExperienceIndex", fields.get("removeExperienceIndex")),
        education=_parse_entry_list("education", fields.get("education"), EducationEntry),
        experience=_parse_entry_list("experience", fields.get("experience"), ExperienceEntry),
        image=files.get(IMAGE_FIELD),
        education_logos=logos,
    )


def remove_at(items: Sequence[EntryT], index: int) -> list[EntryT]:
    """Drop the item at `index`; an index outside [0, len) leaves the list unchanged."""
    if 0 <= index < len(items):
        return [item for i, item in enumerate(items) if i != index]
    return list(items)


def _merge_list(
    stored: Sequence[EntryT],
    new_entry: EntryT | None,
    remove_index: int | None,
    replacement: Sequence[EntryT] | None,
) -> list[EntryT]:
    merged = list(stored)
    if new_entry is not None:
        merged.append(new_entry)
    if remove_index is not None:
        merged = remove_at(merged, remove_index)
    if replacement is not None:
        merged = list(replacement)
    return merged


def _resolve_logo(
    entry: EducationEntry,
    index: int,
    stored: Sequence[EducationEntry] | None,
    urls: Mapping[Any, str],
) -> EducationEntry:
    uploaded = urls.get(("education", index))
    if uploaded:
        return entry.model_copy(update={"logo": uploaded})
    # stored is None unless a full list replaced the merged one.
    if stored is not None and index < len(stored) and stored[index].logo:
        return entry.model_copy(update={"logo": stored[index].logo})
    return entry


def merge_profile_update(
    current: Profile,
    payload: ProfileUpdatePayload,
    uploader: MediaUploader,
    *,
    max_workers: int = 4,
) -> dict[str, Any]:
    """Return {field: value} to set on the stored profile. Untouched fields are absent."""
    education = _merge_list(current.education, payload.new_education, payload.remove_education_index, payload.education)
    experience = _merge_list(
        current.experience, payload.new_experience, payload.remove_experience_index, payload.experience
    )

    tasks: list[UploadTask] = []
    if payload.image is not None:
        tasks.append(UploadTask(key=IMAGE_FIELD, media=payload.image, target=PROFILE_IMAGE))
    for index in sorted(payload.education_logos):
        if index < len(education):
            tasks.append(UploadTask(key=("education", index), media=payload.education_logos[index], target=EDUCATION_LOGO))
        else:
            logger.warning("ignoring logo for education[%d]: only %d entries", index, len(education))

    urls = upload_all(uploader, tasks, max_workers=max_workers)

    update: dict[str, Any] = dict(payload.scalars)
    if payload.touches_education:
        carried = current.education if payload.education is not None else None
        update["education"] = [
            _resolve_logo(entry, index, carried, urls).to_document() for index, entry in enumerate(education)
        ]
    if payload.touches_experience:
        update["experience"] = [entry.to_document() for entry in experience]
    if IMAGE_FIELD in urls:
        update["image"] = urls[IMAGE_FIELD]
    return update
