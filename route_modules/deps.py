"""
Shared route dependencies: who is calling, the backend bound to them, and
the per-session query cache.
"""
from fastapi import Depends, Request
from typing import MutableMapping, Optional

from auth import get_identity, ANONYMOUS_PRINCIPAL
from member_session import MemberSession
from query_cache import QueryCache, cache_registry
from service_modules.base import Caller
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries

CACHE_ID_KEY = "cacheId"
CACHE_OWNER_KEY = "cacheOwner"


def get_member_session(request: Request) -> MemberSession:
    return MemberSession(request.session)


def get_caller(
    identity: Optional[str] = Depends(get_identity),
    member_session: MemberSession = Depends(get_member_session)
) -> Caller:
    """Identity handle first; otherwise the email member held in the session."""
    if identity:
        return Caller(principal=identity)
    auth = member_session.read()
    if auth and auth.authenticated and auth.member_id.isdigit():
        return Caller(principal=ANONYMOUS_PRINCIPAL, member_id=int(auth.member_id))
    return Caller()


def get_backend(caller: Caller = Depends(get_caller)) -> GymBackend:
    return GymBackend(caller)


def member_cache_owner(member_id: int) -> str:
    return f"member:{member_id}"


def cache_owner(caller: Caller) -> Optional[str]:
    if caller.member_id is not None:
        return member_cache_owner(caller.member_id)
    if not caller.is_anonymous:
        return caller.principal
    return None


def drop_session_cache(session: MutableMapping):
    cache_id = session.pop(CACHE_ID_KEY, None)
    session.pop(CACHE_OWNER_KEY, None)
    if cache_id:
        cache_registry.drop(cache_id)


def session_cache(session: MutableMapping, owner: Optional[str]) -> QueryCache:
    """
    The query cache of this browser session, bound to whoever owns it.

    Anonymous callers get a throwaway cache. A cache never outlives a change
    of owner: a different principal or member starts from an empty one.
    """
    if owner is None:
        return QueryCache()

    cache_id = session.get(CACHE_ID_KEY)
    if cache_id and session.get(CACHE_OWNER_KEY) != owner:
        drop_session_cache(session)
        cache_id = None
    if not cache_id:
        cache_id = cache_registry.new_id()
        session[CACHE_ID_KEY] = cache_id
        session[CACHE_OWNER_KEY] = owner
    return cache_registry.for_id(cache_id)


def bind_session_cache(session: MutableMapping, owner: str, cache: QueryCache):
    """Register `cache` as the session's cache for `owner`, replacing any other."""
    cache_id = session.get(CACHE_ID_KEY)
    if cache_id and cache_registry.get(cache_id) is cache:
        session[CACHE_OWNER_KEY] = owner
        return
    drop_session_cache(session)
    cache_id = cache_registry.new_id()
    cache_registry.put(cache_id, cache)
    session[CACHE_ID_KEY] = cache_id
    session[CACHE_OWNER_KEY] = owner


def get_queries(
    request: Request,
    caller: Caller = Depends(get_caller),
    member_session: MemberSession = Depends(get_member_session)
) -> GymQueries:
    cache = session_cache(request.session, cache_owner(caller))
    return GymQueries(GymBackend(caller), cache, member_session)
