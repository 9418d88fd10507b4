"""Mapping of CFTools wire payloads onto the domain models."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from ..models import (
    PERMANENT,
    Ban,
    BanStatus,
    CFToolsId,
    Expiration,
    Game,
    GameEnvironment,
    GameHost,
    GameHostGeolocation,
    GameSecurity,
    GameServerAttributes,
    GameServerItem,
    GameServerStatus,
    GameSession,
    HitZones,
    LeaderboardItem,
    Player,
    PlayerCount,
    PlayerStatistics,
    PriorityQueueItem,
    ServerInfo,
    SessionConnection,
    SteamId64,
    SteamWorkshopMod,
    WeaponStatistic,
    WhitelistItem,
)

_datetime_adapter = TypeAdapter(datetime)


def as_date(value: str) -> datetime:
    """Parse a CFTools timestamp; values without a zone designator are UTC."""
    parsed = _datetime_adapter.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_expiration(value: Optional[str]) -> Expiration:
    return as_date(value) if value else PERMANENT


def expiration_to_wire(expiration: Optional[Expiration]) -> Optional[str]:
    """ISO-8601 form of an expiration, None for permanent entries."""
    if expiration is None or expiration == PERMANENT:
        return None
    assert isinstance(expiration, datetime)
    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)
    return expiration.astimezone(timezone.utc).isoformat()


def to_hit_zones(zones: Optional[Dict[str, Any]]) -> HitZones:
    zones = zones or {}
    return HitZones(
        brain=zones.get("brain") or 0,
        head=zones.get("head") or 0,
        left_arm=zones.get("leftarm") or 0,
        left_foot=zones.get("leftfoot") or 0,
        left_hand=zones.get("lefthand") or 0,
        left_leg=zones.get("leftleg") or 0,
        right_arm=zones.get("rightarm") or 0,
        right_foot=zones.get("rightfoot") or 0,
        right_hand=zones.get("righthand") or 0,
        right_leg=zones.get("rightleg") or 0,
        torso=zones.get("torso") or 0,
    )


def to_weapon_breakdown(
    weapons: Optional[Dict[str, Dict[str, Any]]],
) -> Dict[str, WeaponStatistic]:
    result = {}
    for class_name, weapon in (weapons or {}).items():
        result[class_name] = WeaponStatistic(
            damage=weapon.get("damage") or 0,
            deaths=weapon.get("deaths") or 0,
            hits=weapon.get("hits") or 0,
            kills=weapon.get("kills") or 0,
            longest_kill=weapon.get("longest_kill") or 0,
            longest_shot=weapon.get("longest_shot") or 0,
            hit_zones=to_hit_zones(weapon.get("zones")),
        )
    return result


def to_player(raw: Dict[str, Any]) -> Player:
    omega = raw.get("omega", {})
    game = raw.get("game") or {}
    # Older servers report under "general", current ones per game
    stats = game.get("dayz") or game.get("general") or {}

    kills = stats.get("kills") or 0
    if isinstance(kills, dict):
        kills = kills.get("players") or 0

    return Player(
        names=omega.get("name_history", []),
        playtime=omega.get("playtime") or 0,
        sessions=omega.get("sessions") or 0,
        statistics=PlayerStatistics(
            kills=kills,
            deaths=stats.get("deaths") or 0,
            suicides=stats.get("suicides") or 0,
            environment_deaths=stats.get("environment_deaths") or 0,
            infected_deaths=stats.get("infected_deaths") or 0,
            hits=stats.get("hits") or 0,
            kill_death_ratio=stats.get("kdratio") or 0,
            longest_kill=stats.get("longest_kill") or 0,
            longest_shot=stats.get("longest_shot") or 0,
            hit_zones=to_hit_zones(stats.get("zones")),
            weapons_breakdown=to_weapon_breakdown(stats.get("weapons")),
        ),
    )


def to_leaderboard(raw: Dict[str, Any]) -> List[LeaderboardItem]:
    return [
        LeaderboardItem(
            id=CFToolsId(item["cftools_id"]),
            name=item.get("latest_name", ""),
            rank=item["rank"],
            playtime=item.get("playtime") or 0,
            kills=item.get("kills") or 0,
            deaths=item.get("deaths") or 0,
            suicides=item.get("suicides") or 0,
            hits=item.get("hits") or 0,
            environment_deaths=item.get("environment_deaths") or 0,
            kill_death_ratio=item.get("kdratio") or 0,
            longest_kill=item.get("longest_kill") or 0,
            longest_shot=item.get("longest_shot") or 0,
        )
        for item in raw.get("leaderboard", [])
    ]


def _entry_fields(entry: Dict[str, Any]) -> Dict[str, Any]:
    meta = entry.get("meta", {})
    return {
        "created": as_date(entry["created_at"]),
        "created_by": CFToolsId(entry["creator"]["cftools_id"]),
        "comment": meta.get("comment", ""),
        "expiration": as_expiration(meta.get("expiration")),
    }


def to_priority_queue_item(raw: Dict[str, Any]) -> Optional[PriorityQueueItem]:
    entries = raw.get("entries") or []
    if not entries:
        return None
    return PriorityQueueItem(**_entry_fields(entries[0]))


def to_whitelist_item(raw: Dict[str, Any]) -> Optional[WhitelistItem]:
    entries = raw.get("entries") or []
    if not entries:
        return None
    return WhitelistItem(**_entry_fields(entries[0]))


def _ban_status(value: Optional[str]) -> Optional[BanStatus]:
    try:
        return BanStatus(value)
    except ValueError:
        return None


def to_bans(raw: Dict[str, Any]) -> List[Ban]:
    bans = []
    for entry in raw.get("entries") or []:
        bans.append(
            Ban(
                id=entry["id"],
                created=as_date(entry["created_at"]),
                reason=entry.get("reason", ""),
                expiration=as_expiration(entry.get("expires_at")),
                status=_ban_status(entry.get("status")),
            )
        )
    return bans


def to_server_info(raw: Dict[str, Any]) -> ServerInfo:
    server = raw["server"]
    meta = server.get("_object", {})
    gameserver = server.get("gameserver", {})
    return ServerInfo(
        nickname=meta.get("nickname", ""),
        owner=meta.get("resource_owner", ""),
        created=as_date(meta["created_at"]),
        game=Game(str(gameserver.get("game", Game.DAYZ.value))),
        gameserver_id=gameserver.get("gameserver_id", ""),
        connection_protocol=server.get("connection", {}).get("protcol_used"),
        worker_state=server.get("worker", {}).get("state"),
    )


def to_game_sessions(raw: Dict[str, Any]) -> List[GameSession]:
    sessions = []
    for session in raw.get("sessions") or []:
        gamedata = session.get("gamedata", {})
        connection = session.get("connection", {})
        info = session.get("info", {})
        live = session.get("live", {})
        ping = live.get("ping") or {}
        steam64 = gamedata.get("steam64")
        sessions.append(
            GameSession(
                id=session["id"],
                cftools_id=CFToolsId(session["cftools_id"]),
                player_name=gamedata.get("player_name", ""),
                steam_id=SteamId64(steam64) if steam64 else None,
                created=as_date(session["created_at"]),
                connection=SessionConnection(
                    ipv4=connection.get("ipv4"),
                    country_code=connection.get("country_code"),
                    provider=connection.get("provider"),
                    malicious=bool(connection.get("malicious")),
                ),
                ban_count=info.get("ban_count") or 0,
                labels=info.get("labels") or [],
                loaded=bool(live.get("loaded")),
                ping=ping.get("actual"),
            )
        )
    return sessions


def to_game_server(server: Dict[str, Any]) -> GameServerItem:
    status = server["status"]
    environment = server["environment"]
    attributes = server["attributes"]
    geolocation = server["geolocation"]
    host = server["host"]
    return GameServerItem(
        name=server["name"],
        version=server["version"],
        map=server["map"],
        rank=server["rank"],
        rating=server["rating"],
        online=server["online"],
        status=GameServerStatus(
            players=PlayerCount(
                online=status["players"],
                slots=status["slots"],
                queue=status.get("queue", {}).get("size", 0),
            )
        ),
        security=GameSecurity(**server["security"]),
        mods=[
            SteamWorkshopMod(file_id=mod["file_id"], name=mod["name"])
            for mod in server.get("mods", [])
        ],
        host=GameHost(
            address=host["address"],
            game_port=host["game_port"],
            query_port=host["query_port"],
        ),
        geolocation=GameHostGeolocation(
            available=geolocation["available"],
            city=geolocation.get("city") or {},
            continent=geolocation.get("continent"),
            country=geolocation.get("country") or {},
            timezone=geolocation.get("timezone"),
        ),
        environment=GameEnvironment(
            first_person_perspective=environment["perspectives"]["1rd"],
            third_person_perspective=environment["perspectives"]["3rd"],
            time=environment["time"],
            time_acceleration=environment.get("time_acceleration") or {},
        ),
        attributes=GameServerAttributes(
            dlc=attributes["dlc"],
            dlcs=attributes.get("dlcs") or {},
            experimental=attributes["experimental"],
            hive=attributes["hive"],
            modded=attributes["modded"],
            official=attributes["official"],
            whitelist=attributes["whitelist"],
        ),
    )
