import asyncio

import pytest

from app.api.performance_utils.cache import MISS, monthly_key, profile_key, snapshot_key
from app.core.errors import InvalidArgument, NotFound, UpstreamFailure


def run(coro):
    return asyncio.run(coro)


def test_monthly_rollup(service):
    rollup = run(service.get_monthly("7", 2024, 3))

    assert rollup.month == "March 2024"
    assert rollup.published == 1
    assert rollup.draft == 1
    assert rollup.total == 2
    assert rollup.total_worth == 500_000
    assert rollup.channels.bayut == 1


def test_monthly_cache_hit_skips_upstream(service, bitrix):
    first = run(service.get_monthly("7", 2024, 3))
    second = run(service.get_monthly("7", 2024, 3))

    assert first == second
    assert len(bitrix.listing_calls) == 1
    assert len(bitrix.user_calls) == 1


def test_monthly_recomputes_after_ttl(service, bitrix, clock):
    run(service.get_monthly("7", 2024, 3))
    clock.advance(301)
    run(service.get_monthly("7", 2024, 3))

    assert len(bitrix.listing_calls) == 2


def test_monthly_query_is_scoped_by_email_and_month(service, bitrix):
    run(service.get_monthly("7", 2024, 2))
    assert bitrix.listing_calls == [("sara@example.com", 2024, 2)]


def test_returned_rollup_is_a_copy(service, cache):
    rollup = run(service.get_monthly("7", 2024, 3))
    rollup.published = 99

    assert cache.get(monthly_key("7", 2024, 3)).published == 1
    assert run(service.get_monthly("7", 2024, 3)).published == 1


def test_unknown_user_is_not_found(service, cache):
    with pytest.raises(NotFound):
        run(service.get_monthly("404", 2024, 3))
    assert cache.get(monthly_key("404", 2024, 3)) is MISS


@pytest.mark.parametrize("user_id", [None, "", "  ", "abc", "12a", "-3", "²", "٣", "7²"])
def test_bad_user_id(service, user_id):
    with pytest.raises(InvalidArgument):
        run(service.get_monthly(user_id, 2024, 3))


@pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), (2024, 5), (2025, 1), (1900, 1)])
def test_bad_window(service, year, month):
    with pytest.raises(InvalidArgument):
        run(service.get_monthly("7", year, month))


def test_user_without_email_gets_empty_month(service, bitrix):
    bitrix.users["8"] = {"ID": "8", "NAME": "New", "EMAIL": ""}

    rollup = run(service.get_monthly("8", 2024, 3))

    assert rollup.total == 0
    assert bitrix.listing_calls == []


def test_yearly_has_one_entry_per_elapsed_month(service):
    yearly = run(service.get_yearly("7", 2024))

    assert yearly.year == 2024
    assert [m.month_number for m in yearly.months] == [1, 2, 3, 4]
    assert [m.total for m in yearly.months] == [1, 1, 2, 1]
    assert yearly.profile.employee == "Sara Haddad"


def test_yearly_months_match_monthly(service):
    yearly = run(service.get_yearly("7", 2024))
    service.cache.clear()

    for entry in yearly.months:
        assert entry == run(service.get_monthly("7", 2024, entry.month_number))


def test_yearly_reuses_cached_months(service, bitrix):
    run(service.get_monthly("7", 2024, 2))
    run(service.get_yearly("7", 2024))

    fetched = [(year, month) for _, year, month in bitrix.listing_calls]
    assert fetched == [(2024, 2), (2024, 1), (2024, 3), (2024, 4)]


def test_past_year_covers_all_months(service):
    yearly = run(service.get_yearly("7", 2023))
    assert [m.month_number for m in yearly.months] == list(range(1, 13))


def test_future_year_is_rejected(service):
    with pytest.raises(InvalidArgument):
        run(service.get_yearly("7", 2025))


def test_yearly_aborts_on_upstream_failure(service, bitrix, cache):
    bitrix.fail_months.add((2024, 3))

    with pytest.raises(UpstreamFailure):
        run(service.get_yearly("7", 2024))

    # months before the failure stay cached, later ones were never fetched
    assert cache.get(monthly_key("7", 2024, 2)) is not MISS
    assert cache.get(monthly_key("7", 2024, 4)) is MISS
    assert (2024, 4) not in [(y, m) for _, y, m in bitrix.listing_calls]


def test_snapshot_is_current_month_with_profile(service, cache):
    snapshot = run(service.get_snapshot("7"))

    assert snapshot.profile.role == "Senior Agent"
    assert snapshot.profile.socials == {"linkedin": "in/sara-haddad"}
    assert snapshot.rollup.month == "April 2024"
    assert snapshot.rollup.channels.website == 1
    assert cache.get(snapshot_key("7")) is not MISS
    assert cache.get(monthly_key("7", 2024, 4)) is not MISS


def test_snapshot_cache_hit_skips_upstream(service, bitrix):
    run(service.get_snapshot("7"))
    run(service.get_snapshot("7"))

    assert len(bitrix.user_calls) == 1
    assert len(bitrix.listing_calls) == 1


def test_snapshot_unknown_user(service):
    with pytest.raises(NotFound):
        run(service.get_snapshot("99"))


def test_ranking_is_cached(service, cache, clock):
    first = run(service.get_ranking("7"))

    service.clock = lambda: 0
    second = run(service.get_ranking("7"))

    assert first == second
    assert first.id == "7"
    assert first.message == "Ranking data retrieved successfully."

    clock.advance(300)
    assert run(service.get_ranking("7")).timestamp == 0


def test_ranking_rejects_bad_id(service):
    with pytest.raises(InvalidArgument):
        run(service.get_ranking("seven"))


def test_profile_is_cached_across_monthly_calls(service, bitrix):
    run(service.get_monthly_performance("7", 2024, 3))
    again = run(service.get_monthly_performance("7", 2024, 3))

    assert again.profile.email == "sara@example.com"
    assert bitrix.user_calls == ["7"]
    assert len(bitrix.listing_calls) == 1


def test_warm_yearly_needs_no_upstream(service, bitrix):
    run(service.get_yearly("7", 2024))

    async def unreachable(user_id):
        raise UpstreamFailure("Bitrix request failed: user.get")

    bitrix.fetch_user = unreachable
    yearly = run(service.get_yearly("7", 2024))

    assert len(yearly.months) == 4
    assert len(bitrix.listing_calls) == 4


def test_profile_expires_with_ttl(service, bitrix, clock):
    run(service.get_profile("7"))
    clock.advance(300)
    run(service.get_profile("7"))

    assert bitrix.user_calls == ["7", "7"]


def test_unknown_profile_is_not_cached(service, bitrix, cache):
    for _ in range(2):
        with pytest.raises(NotFound):
            run(service.get_profile("404"))

    assert bitrix.user_calls == ["404", "404"]
    assert cache.get(profile_key("404")) is MISS
