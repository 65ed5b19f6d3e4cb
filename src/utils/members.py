"""
Rush Bot - Member Utilities
===========================

Display-name helpers used when rendering rosters and leaderboards.
"""

from typing import Optional

import discord


def profile_name(user) -> Optional[str]:
    """
    Best display name carried by a user/member object.

    Args:
        user: discord.Member or discord.User.

    Returns:
        Markdown-escaped display name, or None if the object has none.
    """
    name = (
        getattr(user, "display_name", None)
        or getattr(user, "global_name", None)
        or getattr(user, "name", None)
    )
    return discord.utils.escape_markdown(name) if isinstance(name, str) and name else None


async def resolve_display_name(
    guild: Optional[discord.Guild],
    user_id: int,
    client: Optional[discord.Client] = None,
) -> str:
    """
    Resolve a user's current display name for rendering.

    Tries the member cache, then a member fetch, then a user fetch.

    Args:
        guild: Guild to resolve the member in.
        user_id: Discord user ID.
        client: Client used for the final user fetch.

    Returns:
        Escaped display name, or "User <id>" when unresolvable.
    """
    fallback = f"User {user_id}"

    member = guild.get_member(user_id) if guild is not None else None
    if member is None and guild is not None:
        try:
            member = await guild.fetch_member(user_id)
        except discord.HTTPException:
            member = None

    if member is not None:
        return profile_name(member) or fallback

    if client is None:
        return fallback
    try:
        user = await client.fetch_user(user_id)
    except discord.HTTPException:
        return fallback
    return profile_name(user) or fallback


__all__ = ["profile_name", "resolve_display_name"]
