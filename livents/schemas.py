from pydantic import AliasChoices, BaseModel, Field


def _alias(camel: str, snake: str) -> AliasChoices:
    return AliasChoices(camel, snake)


class EventCreate(BaseModel):
    """Body of ``POST /events``. Accepts camelCase keys as well as snake_case."""

    name: str | None = None
    description: str = ""
    date: str = ""
    time: str = ""
    sp1_enabled: bool = Field(default=False, validation_alias=_alias("sp1Enabled", "sp1_enabled"))
    sp2_enabled: bool = Field(default=False, validation_alias=_alias("sp2Enabled", "sp2_enabled"))
    sp1_description: str = Field(
        default="", validation_alias=_alias("sp1Description", "sp1_description")
    )
    sp2_description: str = Field(
        default="", validation_alias=_alias("sp2Description", "sp2_description")
    )


class AdminRoleUpdate(BaseModel):
    admin_role: str | None = Field(default=None, validation_alias=_alias("adminRole", "admin_role"))


class RecordingCreate(BaseModel):
    event_id: str | None = Field(default=None, validation_alias=_alias("eventId", "event_id"))
    playback_url: str = Field(default="", validation_alias=_alias("playbackUrl", "playback_url"))
    thumbnail_url: str = Field(
        default="", validation_alias=_alias("thumbnailUrl", "thumbnail_url")
    )
    duration_seconds: int | None = Field(
        default=None, validation_alias=_alias("durationSeconds", "duration_seconds")
    )


class TokenResponse(BaseModel):
    token: str
