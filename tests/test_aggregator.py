"""
Tests for the aggregation module.

Covers the merge of the five ranked lists (determinism, deduplication,
priority placement, graceful degradation) and display selection.
"""

import pytest
import time
from datetime import datetime, timezone

from ideabubbles.aggregation.aggregator import (
    PRIORITY_ORDER,
    RankedLists,
    aggregate,
    max_score_in,
    select_for_display,
)

from tests.test_config import EXPECTED


def ids(ideas):
    return [idea.id for idea in ideas]


@pytest.fixture
def overlapping_lists(make_idea):
    """Five lists sharing several ideas."""
    a, b, c, d, e, f = (make_idea(i, score=s, hours_ago=h) for i, s, h in [
        ("a", 9, 5), ("b", 4, 1), ("c", 0, 0), ("d", 2, 40), ("e", 1, 20), ("f", 0, 30),
    ])
    return RankedLists(
        newest=[c, b, a],
        most_voted=[a, b, d],
        oldest=[d, f],
        random=[f, e, c],
        random_voted=[e, a],
    )


class TestPriorityOrder:
    """The fixed order in which lists claim positions."""
    
    def test_priority_order(self):
        assert list(PRIORITY_ORDER) == EXPECTED["aggregation"]["priority_order"]
    
    def test_in_priority_order_names(self, overlapping_lists):
        names = [name for name, _ in overlapping_lists.in_priority_order()]
        
        assert names == EXPECTED["aggregation"]["priority_order"]


class TestAggregate:
    """Tests for aggregate()."""
    
    def test_merged_order(self, overlapping_lists):
        assert ids(aggregate(overlapping_lists)) == ["a", "b", "d", "c", "f", "e"]
    
    def test_deterministic(self, overlapping_lists):
        assert aggregate(overlapping_lists) == aggregate(overlapping_lists)
    
    def test_no_duplicates(self, overlapping_lists):
        merged = ids(aggregate(overlapping_lists))
        
        assert len(merged) == len(set(merged))
    
    def test_every_input_idea_is_kept(self, overlapping_lists):
        all_ids = {idea.id for _, ideas in overlapping_lists.in_priority_order() for idea in ideas}
        
        assert set(ids(aggregate(overlapping_lists))) == all_ids
    
    def test_length_bounded_by_total(self, overlapping_lists):
        assert len(aggregate(overlapping_lists)) <= overlapping_lists.total
    
    def test_length_equals_total_when_all_distinct(self, make_idea):
        lists = RankedLists(
            newest=[make_idea(1)],
            most_voted=[make_idea(2), make_idea(3)],
            oldest=[make_idea(4)],
            random=[make_idea(5)],
            random_voted=[make_idea(6)],
        )
        
        assert len(aggregate(lists)) == lists.total == 6
    
    def test_most_voted_position_wins_over_newest(self, make_idea):
        x = make_idea("x", score=5)
        y = make_idea("y", score=7)
        z = make_idea("z")
        with_newest = RankedLists(most_voted=[y, x], newest=[x, z])
        most_voted_only = RankedLists(most_voted=[y, x])
        
        merged = ids(aggregate(with_newest))
        
        assert merged.index("x") == ids(aggregate(most_voted_only)).index("x") == 1
    
    def test_first_copy_is_the_one_kept(self, make_idea):
        voted_copy = make_idea("x", score=3, title="From most voted")
        newest_copy = make_idea("x", score=3, title="From newest")
        
        merged = aggregate(RankedLists(most_voted=[voted_copy], newest=[newest_copy]))
        
        assert merged[0].title == "From most voted"
    
    def test_all_empty(self):
        assert aggregate(RankedLists()) == []
    
    @pytest.mark.parametrize("survivor", ["newest", "most_voted", "oldest", "random", "random_voted"])
    def test_single_surviving_list(self, make_idea, survivor):
        one, two = make_idea(1), make_idea(2)
        lists = RankedLists(**{survivor: [one, two, one]})
        
        assert ids(aggregate(lists)) == ["1", "2"]
    
    def test_does_not_mutate_inputs(self, overlapping_lists):
        before = [list(ideas) for _, ideas in overlapping_lists.in_priority_order()]
        
        aggregate(overlapping_lists)
        
        assert [list(ideas) for _, ideas in overlapping_lists.in_priority_order()] == before


class TestRankedLists:
    """Tests for the RankedLists container."""
    
    def test_from_mapping_treats_missing_and_none_as_empty(self, make_idea):
        lists = RankedLists.from_mapping({"newest": [make_idea(1)], "oldest": None})
        
        assert ids(lists.newest) == ["1"]
        assert lists.oldest == []
        assert lists.random == []
        assert lists.total == 1
    
    def test_to_dict_uses_camel_case_groups(self, make_idea):
        payload = RankedLists(most_voted=[make_idea(1)], random_voted=[make_idea(2)]).to_dict()
        
        assert set(payload) == {"newest", "mostVoted", "oldest", "random", "randomVoted"}
        assert payload["mostVoted"][0]["id"] == "1"
        assert payload["randomVoted"][0]["id"] == "2"


class TestSelectForDisplay:
    """Tests for select_for_display()."""
    
    def test_newest_first(self, make_idea):
        ideas = [make_idea("old", hours_ago=10), make_idea("new", hours_ago=0), make_idea("mid", hours_ago=5)]
        
        assert ids(select_for_display(ideas, 10)) == ["new", "mid", "old"]
    
    def test_truncates_to_limit(self, make_idea):
        ideas = [make_idea(i, hours_ago=i) for i in range(15)]
        
        selected = select_for_display(ideas, 10)
        
        assert ids(selected) == [str(i) for i in range(10)]
    
    def test_equal_timestamps_keep_aggregation_order(self, make_idea):
        ideas = [make_idea("b"), make_idea("a"), make_idea("c")]
        
        assert ids(select_for_display(ideas, 10)) == ["b", "a", "c"]
    
    def test_hidden_ideas_dropped(self, make_idea):
        ideas = [make_idea("shown"), make_idea("hidden", exclude_from_display=True)]
        
        assert ids(select_for_display(ideas, 10)) == ["shown"]
    
    def test_mixed_naive_and_aware_timestamps(self, make_idea):
        aware = make_idea("aware", created_at=datetime(2030, 1, 1, tzinfo=timezone.utc))
        naive = make_idea("naive", created_at=datetime(2020, 1, 1))
        
        assert ids(select_for_display([naive, aware], 10)) == ["aware", "naive"]
    
    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_naive_timestamps_read_as_utc(self, make_idea, monkeypatch):
        # 12:00 naive is newer than 11:00 UTC whatever the host zone is
        naive = make_idea("naive", created_at=datetime(2025, 5, 20, 12, 0))
        aware = make_idea("aware", created_at=datetime(2025, 5, 20, 11, 0, tzinfo=timezone.utc))
        
        try:
            for zone in ("UTC", "Asia/Tokyo", "America/Los_Angeles"):
                monkeypatch.setenv("TZ", zone)
                time.tzset()
                assert ids(select_for_display([aware, naive], 10)) == ["naive", "aware"], zone
        finally:
            monkeypatch.undo()
            time.tzset()


class TestMaxScore:
    
    def test_max_score(self, make_idea):
        assert max_score_in([make_idea(1, score=3), make_idea(2, score=8)]) == 8
    
    def test_empty_set(self):
        assert max_score_in([]) == 0
