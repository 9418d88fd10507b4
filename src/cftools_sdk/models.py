"""Value types and domain models for the CFTools Cloud client.

Identifiers and credentials are immutable dataclasses compared by value.
Results returned to callers are pydantic models mapped from the snake_case
wire format of the API.
"""

import ipaddress
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

PERMANENT = "Permanent"

Expiration = Union[datetime, Literal["Permanent"]]


@dataclass(frozen=True)
class Authorization:
    """Bearer credential issued by the login exchange.

    Instances are replaced, never mutated, when the token is refreshed.
    """

    token: str = field(repr=False)
    created: datetime
    expires_at: datetime
    scheme: str = "Bearer"

    def __post_init__(self) -> None:
        if self.expires_at < self.created:
            raise ValueError("Authorization cannot expire before it was created")

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Return True while the expiry instant is strictly in the future."""
        now = now or datetime.now(timezone.utc)
        return self.expires_at > now

    def as_header(self) -> Dict[str, str]:
        return {"Authorization": f"{self.scheme} {self.token}"}


@dataclass(frozen=True)
class LoginCredentials:
    """Application id and secret from the CFTools developer portal."""

    application_id: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class ServerApiId:
    """Identifies a CFTools Cloud server instance (see the server API settings)."""

    id: str


@dataclass(frozen=True)
class Banlist:
    """Identifies a CFTools Cloud ban list."""

    id: str


# =============================================================================
# Player identifiers
# =============================================================================


@dataclass(frozen=True)
class SteamId64:
    id: str


@dataclass(frozen=True)
class BattlEyeGUID:
    id: str

    @property
    def guid(self) -> str:
        return self.id


@dataclass(frozen=True)
class BohemiaInteractiveId:
    id: str


@dataclass(frozen=True)
class CFToolsId:
    """Canonical CFTools account id; the key all server-side operations use."""

    id: str


@dataclass(frozen=True)
class IPAddress:
    """IPv4 or IPv6 address of a player.

    Never resolved to a CFTools id; ban list operations send the raw address
    together with its format tag.
    """

    id: str
    version: int = field(init=False)

    def __post_init__(self) -> None:
        try:
            address = ipaddress.ip_address(self.id)
        except ValueError as e:
            raise ValueError(f"Invalid IP address: {self.id}") from e
        object.__setattr__(self, "id", str(address))
        object.__setattr__(self, "version", address.version)

    @property
    def format(self) -> str:
        return f"ipv{self.version}"


GenericId = Union[SteamId64, BattlEyeGUID, BohemiaInteractiveId, CFToolsId, IPAddress]


# =============================================================================
# Enums
# =============================================================================


class Statistic(str, Enum):
    KILLS = "kills"
    DEATHS = "deaths"
    SUICIDES = "suicides"
    PLAYTIME = "playtime"
    LONGEST_KILL = "longest_kill"
    LONGEST_SHOT = "longest_shot"
    KILL_DEATH_RATIO = "kdratio"


class Game(str, Enum):
    DAYZ = "1"


class BanStatus(str, Enum):
    ACTIVE = "Ban.ACTIVE"
    INACTIVE = "Ban.INACTIVE"


# =============================================================================
# Requests
# =============================================================================


@dataclass(frozen=True)
class PlayerRequest:
    """Player-scoped request with an optional server api id override.

    Operations also accept a bare identifier in place of this object.
    """

    player_id: GenericId
    server_api_id: Optional[ServerApiId] = None


@dataclass(frozen=True)
class GetLeaderboardRequest:
    statistic: Statistic
    order: Literal["ASC", "DESC"] = "DESC"
    limit: Optional[int] = None
    server_api_id: Optional[ServerApiId] = None


@dataclass(frozen=True)
class PutPriorityQueueItemRequest:
    id: GenericId
    comment: str
    expires: Expiration = PERMANENT
    server_api_id: Optional[ServerApiId] = None


@dataclass(frozen=True)
class PutWhitelistItemRequest:
    id: GenericId
    comment: str
    expires: Expiration = PERMANENT
    server_api_id: Optional[ServerApiId] = None


@dataclass(frozen=True)
class GetGameServerDetailsRequest:
    ip: str
    port: int
    game: Game = Game.DAYZ


@dataclass(frozen=True)
class ListBansRequest:
    player_id: GenericId
    list: Banlist


@dataclass(frozen=True)
class PutBanRequest:
    player_id: GenericId
    list: Banlist
    reason: str
    expiration: Expiration = PERMANENT


@dataclass(frozen=True)
class DeleteBanRequest:
    """Delete one ban, identified either by the ban itself or by the player."""

    list: Banlist
    player_id: Optional[GenericId] = None
    ban: Optional["Ban"] = None


@dataclass(frozen=True)
class DeleteBansRequest:
    player_id: GenericId
    list: Banlist


# =============================================================================
# Results
# =============================================================================


class HitZones(BaseModel):
    brain: int = 0
    head: int = 0
    left_arm: int = 0
    left_foot: int = 0
    left_hand: int = 0
    left_leg: int = 0
    right_arm: int = 0
    right_foot: int = 0
    right_hand: int = 0
    right_leg: int = 0
    torso: int = 0


class WeaponStatistic(BaseModel):
    damage: float = 0
    deaths: int = 0
    hits: int = 0
    kills: int = 0
    longest_kill: float = 0
    longest_shot: float = 0
    hit_zones: HitZones = Field(default_factory=HitZones)


class PlayerStatistics(BaseModel):
    kills: int = 0
    deaths: int = 0
    suicides: int = 0
    environment_deaths: int = 0
    infected_deaths: int = 0
    hits: int = 0
    kill_death_ratio: float = 0
    longest_kill: float = 0
    longest_shot: float = 0
    hit_zones: HitZones = Field(default_factory=HitZones)
    weapons_breakdown: Dict[str, WeaponStatistic] = Field(default_factory=dict)


class Player(BaseModel):
    """Metadata of a player on a CFTools Cloud server."""

    names: List[str] = Field(..., description="Known player names, oldest first")
    playtime: int = Field(..., description="Playtime in seconds")
    sessions: int = Field(..., description="Number of sessions on the server")
    statistics: PlayerStatistics = Field(default_factory=PlayerStatistics)


class LeaderboardItem(BaseModel):
    id: CFToolsId
    name: str
    rank: int
    playtime: int = 0
    kills: int = 0
    deaths: int = 0
    suicides: int = 0
    hits: int = 0
    environment_deaths: int = 0
    kill_death_ratio: float = 0
    longest_kill: float = 0
    longest_shot: float = 0


class PriorityQueueItem(BaseModel):
    created: datetime
    created_by: CFToolsId
    comment: str
    expiration: Expiration


class WhitelistItem(BaseModel):
    created: datetime
    created_by: CFToolsId
    comment: str
    expiration: Expiration


class Ban(BaseModel):
    id: str
    created: datetime
    reason: str
    expiration: Expiration
    status: Optional[BanStatus] = None


class ServerInfo(BaseModel):
    """CFTools Cloud view of a registered server."""

    nickname: str
    owner: str
    created: datetime
    game: Game
    gameserver_id: str
    connection_protocol: Optional[str] = None
    worker_state: Optional[str] = None


class SessionConnection(BaseModel):
    ipv4: Optional[str] = None
    country_code: Optional[str] = None
    provider: Optional[str] = None
    malicious: bool = False


class GameSession(BaseModel):
    """Live session of a player currently connected to the server."""

    id: str
    cftools_id: CFToolsId
    player_name: str
    steam_id: Optional[SteamId64] = None
    created: datetime
    connection: SessionConnection = Field(default_factory=SessionConnection)
    ban_count: int = 0
    labels: List[str] = Field(default_factory=list)
    loaded: bool = False
    ping: Optional[int] = None


class PlayerCount(BaseModel):
    online: int
    slots: int
    queue: int


class GameServerStatus(BaseModel):
    players: PlayerCount


class GameSecurity(BaseModel):
    battleye: bool
    vac: bool
    password: bool


class SteamWorkshopMod(BaseModel):
    file_id: int
    name: str


class GameHost(BaseModel):
    address: str
    game_port: int
    query_port: int


class GameHostGeolocation(BaseModel):
    available: bool
    city: Dict[str, Optional[str]] = Field(default_factory=dict)
    continent: Optional[str] = None
    country: Dict[str, Optional[str]] = Field(default_factory=dict)
    timezone: Optional[str] = None


class GameEnvironment(BaseModel):
    first_person_perspective: bool
    third_person_perspective: bool
    time: str
    time_acceleration: Dict[str, float] = Field(default_factory=dict)


class GameServerAttributes(BaseModel):
    dlc: bool
    dlcs: Dict[str, bool] = Field(default_factory=dict)
    experimental: bool
    hive: str
    modded: bool
    official: bool
    whitelist: bool


class GameServerItem(BaseModel):
    """Game server metadata as queried by CFTools Cloud."""

    name: str
    version: str
    map: str
    rank: int
    rating: float
    online: bool
    status: GameServerStatus
    security: GameSecurity
    mods: List[SteamWorkshopMod] = Field(default_factory=list)
    host: GameHost
    geolocation: GameHostGeolocation
    environment: GameEnvironment
    attributes: GameServerAttributes

