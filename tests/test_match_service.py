"""
Tests for the match orchestrator
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from adventure.exceptions import ForbiddenError, NotFoundError, ValidationError
from adventure.models.match import MatchResult
from adventure.models.status_enums import MatchStatus, VideoStatus
from adventure.services.match_generation_service import MatchGenerationService
from adventure.services.match_service import MatchService


def scripted_generator(scores_by_product):
    """Generator double that scores a pair by the campaign's product name"""
    generator = MagicMock()

    async def _generate(video, campaign):
        score = scores_by_product[campaign.product_name]
        return MatchResult(score=score, reasoning=f"{video.title} x {campaign.product_name}")

    generator.generate = AsyncMock(side_effect=_generate)
    return generator


@pytest.fixture
def creator(make_user):
    return make_user(name="Cora", role="creator")


@pytest.fixture
def marketer(make_user):
    return make_user(name="Mark", role="marketer")


class TestFindMatchesForVideo:

    @pytest.mark.asyncio
    async def test_matches_every_campaign_sorted_by_score(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        make_campaign(marketer.id, product_name="Low")
        make_campaign(marketer.id, product_name="High")
        make_campaign(marketer.id, product_name="Mid")
        service = MatchService(generator=scripted_generator({"Low": 20, "High": 90, "Mid": 55}))

        matches = await service.find_matches(creator, video_id=video.id)

        assert [m.match_score for m in matches] == [90, 55, 20]
        assert [m.campaign.product_name for m in matches] == ["High", "Mid", "Low"]
        assert all(m.status == "pending" for m in matches)
        assert all(m.video.creator_name == "Cora" for m in matches)
        assert all(m.campaign.marketer_name == "Mark" for m in matches)
        assert len(fake_db.matches.docs) == 3

    @pytest.mark.asyncio
    async def test_equal_scores_keep_visit_order(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        for name in ("First", "Second", "Third"):
            make_campaign(marketer.id, product_name=name)
        service = MatchService(generator=scripted_generator({"First": 60, "Second": 60, "Third": 60}))

        matches = await service.find_matches(creator, video_id=video.id)

        assert [m.campaign.product_name for m in matches] == ["First", "Second", "Third"]

    @pytest.mark.asyncio
    async def test_second_call_reuses_stored_matches(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        make_campaign(marketer.id, product_name="A")
        make_campaign(marketer.id, product_name="B")
        generator = scripted_generator({"A": 40, "B": 80})
        service = MatchService(generator=generator)

        first = await service.find_matches(creator, video_id=video.id)
        second = await service.find_matches(creator, video_id=video.id)

        assert generator.generate.await_count == 2
        assert [m.id for m in first] == [m.id for m in second]
        assert [m.match_score for m in second] == [80, 40]
        assert len(fake_db.matches.docs) == 2

    @pytest.mark.asyncio
    async def test_existing_match_is_returned_unchanged(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        old = make_campaign(marketer.id, product_name="Old")
        make_campaign(marketer.id, product_name="New")
        fake_db.matches.seed(
            {
                "video_id": video.id,
                "campaign_id": old.id,
                "match_score": 33,
                "reasoning": "stored earlier",
                "status": "accepted",
            }
        )
        generator = scripted_generator({"New": 70})
        service = MatchService(generator=generator)

        matches = await service.find_matches(creator, video_id=video.id)

        assert generator.generate.await_count == 1
        stored = next(m for m in matches if m.campaign_id == old.id)
        assert stored.match_score == 33
        assert stored.reasoning == "stored earlier"
        assert stored.status == "accepted"

    @pytest.mark.asyncio
    async def test_video_marked_matched_after_new_match(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        make_campaign(marketer.id, product_name="A")
        service = MatchService(generator=scripted_generator({"A": 50}))

        matches = await service.find_matches(creator, video_id=video.id)

        assert fake_db.videos.docs[0]["status"] == VideoStatus.MATCHED.value
        assert matches[0].video.status == "matched"

    @pytest.mark.asyncio
    async def test_nan_llm_score_is_stored_as_fallback(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id, genre="comedy")
        make_campaign(marketer.id, category="food")
        llm = MagicMock()
        llm.generate_text = AsyncMock(return_value='{"score": NaN, "reasoning": "x"}')
        service = MatchService(generator=MatchGenerationService(llm=llm, timeout=5.0))

        matches = await service.find_matches(creator, video_id=video.id)

        assert matches[0].match_score == 65
        assert fake_db.matches.docs[0]["match_score"] == 65

    @pytest.mark.asyncio
    async def test_no_campaigns_returns_empty_list(self, fake_db, creator, make_video):
        video = make_video(creator.id)
        generator = scripted_generator({})
        service = MatchService(generator=generator)

        assert await service.find_matches(creator, video_id=video.id) == []
        generator.generate.assert_not_awaited()
        assert fake_db.videos.docs[0]["status"] == "uploaded"

    @pytest.mark.asyncio
    async def test_other_creators_video_is_forbidden(self, fake_db, creator, make_user, make_video, make_campaign):
        other = make_user(name="Otto", role="creator")
        video = make_video(other.id)
        generator = scripted_generator({})
        service = MatchService(generator=generator)

        with pytest.raises(ForbiddenError):
            await service.find_matches(creator, video_id=video.id)
        generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_marketer_may_match_any_video(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        make_campaign(marketer.id, product_name="A")
        service = MatchService(generator=scripted_generator({"A": 61}))

        matches = await service.find_matches(marketer, video_id=video.id)

        assert [m.match_score for m in matches] == [61]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("video_id", [str(ObjectId()), "not-an-object-id"])
    async def test_unknown_video_not_found(self, fake_db, creator, video_id):
        service = MatchService(generator=scripted_generator({}))

        with pytest.raises(NotFoundError, match="Video not found"):
            await service.find_matches(creator, video_id=video_id)


class TestFindMatchesForCampaign:

    @pytest.mark.asyncio
    async def test_matches_every_video(self, fake_db, creator, marketer, make_video, make_campaign):
        make_video(creator.id, title="One")
        make_video(creator.id, title="Two")
        campaign = make_campaign(marketer.id, product_name="P")
        generator = MagicMock()
        generator.generate = AsyncMock(
            side_effect=lambda video, campaign: MatchResult(score=len(video.title) * 10, reasoning="r")
        )
        service = MatchService(generator=generator)

        matches = await service.find_matches(marketer, campaign_id=campaign.id)

        assert len(matches) == 2
        assert {m.video.title for m in matches} == {"One", "Two"}
        assert all(m.campaign_id == campaign.id for m in matches)

    @pytest.mark.asyncio
    async def test_other_marketers_campaign_is_forbidden(self, fake_db, marketer, make_user, make_campaign):
        other = make_user(name="Olga", role="marketer")
        campaign = make_campaign(other.id)
        service = MatchService(generator=scripted_generator({}))

        with pytest.raises(ForbiddenError):
            await service.find_matches(marketer, campaign_id=campaign.id)

    @pytest.mark.asyncio
    async def test_unknown_campaign_not_found(self, fake_db, marketer):
        service = MatchService(generator=scripted_generator({}))

        with pytest.raises(NotFoundError, match="Campaign not found"):
            await service.find_matches(marketer, campaign_id=str(ObjectId()))


class TestFindMatchesArguments:

    @pytest.mark.asyncio
    async def test_requires_a_target(self, fake_db, creator):
        service = MatchService(generator=scripted_generator({}))

        with pytest.raises(ValidationError):
            await service.find_matches(creator)

    @pytest.mark.asyncio
    async def test_both_targets_are_combined(self, fake_db, marketer, creator, make_video, make_campaign):
        video = make_video(creator.id, title="V")
        campaign = make_campaign(marketer.id, product_name="C")
        service = MatchService(generator=scripted_generator({"C": 75}))

        matches = await service.find_matches(marketer, video_id=video.id, campaign_id=campaign.id)

        # Same pair is reached from both sides; the second visit reuses the stored match
        assert len(matches) == 2
        assert matches[0].id == matches[1].id
        assert len(fake_db.matches.docs) == 1


class TestConcurrentInsert:

    @pytest.mark.asyncio
    async def test_duplicate_key_reuses_winning_record(self, fake_db, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        campaign = make_campaign(marketer.id, product_name="A")
        service = MatchService(generator=scripted_generator({"A": 10}))

        async def insert_after_competitor(doc):
            # A competing request stores the pair first
            fake_db.matches.docs.append({**doc, "_id": ObjectId(), "match_score": 99, "reasoning": "winner"})
            raise DuplicateKeyError("E11000 duplicate key error")

        fake_db.matches.insert_one = insert_after_competitor

        matches = await service.find_matches(creator, video_id=video.id)

        assert len(matches) == 1
        assert matches[0].match_score == 99
        assert matches[0].reasoning == "winner"
        assert matches[0].campaign_id == campaign.id


class TestMatchManagement:

    async def _create_match(self, creator, marketer, make_video, make_campaign):
        video = make_video(creator.id)
        make_campaign(marketer.id, product_name="A")
        service = MatchService(generator=scripted_generator({"A": 50}))
        matches = await service.find_matches(creator, video_id=video.id)
        return service, matches[0]

    @pytest.mark.asyncio
    async def test_accept_match_approves_video(self, fake_db, creator, marketer, make_video, make_campaign):
        service, match = await self._create_match(creator, marketer, make_video, make_campaign)

        accepted = await service.accept_match(creator, match.id)

        assert accepted.status == MatchStatus.ACCEPTED.value
        assert accepted.video.status == VideoStatus.APPROVED.value
        assert fake_db.matches.docs[0]["status"] == "accepted"
        assert fake_db.videos.docs[0]["status"] == "approved"

    @pytest.mark.asyncio
    async def test_reject_match(self, fake_db, creator, marketer, make_video, make_campaign):
        service, match = await self._create_match(creator, marketer, make_video, make_campaign)

        rejected = await service.reject_match(creator, match.id)

        assert rejected.status == "rejected"
        assert fake_db.matches.docs[0]["status"] == "rejected"
        assert fake_db.videos.docs[0]["status"] == "matched"

    @pytest.mark.asyncio
    async def test_only_video_owner_may_respond(self, fake_db, creator, marketer, make_user, make_video, make_campaign):
        service, match = await self._create_match(creator, marketer, make_video, make_campaign)
        other = make_user(name="Otto", role="creator")

        with pytest.raises(ForbiddenError):
            await service.accept_match(other, match.id)

    @pytest.mark.asyncio
    async def test_unknown_match_not_found(self, fake_db, creator):
        service = MatchService(generator=scripted_generator({}))

        with pytest.raises(NotFoundError, match="Match not found"):
            await service.reject_match(creator, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_creator_matches_newest_first(self, fake_db, creator, marketer, make_video, make_campaign):
        service, match = await self._create_match(creator, marketer, make_video, make_campaign)

        matches = await service.get_creator_matches(creator)

        assert [m.id for m in matches] == [match.id]
        assert matches[0].campaign.product_name == "A"

    @pytest.mark.asyncio
    async def test_creator_without_videos_has_no_matches(self, fake_db, creator):
        service = MatchService(generator=scripted_generator({}))

        assert await service.get_creator_matches(creator) == []

    @pytest.mark.asyncio
    async def test_campaign_matches_require_ownership(self, fake_db, creator, marketer, make_user, make_video, make_campaign):
        service, match = await self._create_match(creator, marketer, make_video, make_campaign)
        campaign_id = match.campaign_id

        matches = await service.get_campaign_matches(marketer, campaign_id)
        assert [m.id for m in matches] == [match.id]

        other = make_user(name="Olga", role="marketer")
        with pytest.raises(NotFoundError):
            await service.get_campaign_matches(other, campaign_id)
