import unittest

from rainbow_playlists.playlists import (
    build_folder_structure,
    categorize_playlists,
    has_duplicates,
    mark_editable,
    move_track,
    purge_duplicates,
    sort_by_name,
    track_uris,
)


def _playlist(playlist_id: str, name: str, owner: str = "me", collaborative: bool = False) -> dict:
    return {"id": playlist_id, "name": name, "owner": {"id": owner}, "collaborative": collaborative}


def _item(track_id: str) -> dict:
    return {"track": {"id": track_id, "uri": f"spotify:track:{track_id}"}}


class PlaylistHelperTests(unittest.TestCase):
    def test_mark_editable_owned_or_collaborative(self) -> None:
        marked = mark_editable(
            [_playlist("a", "A"), _playlist("b", "B", owner="other", collaborative=True), _playlist("c", "C", owner="other")],
            user_id="me",
        )
        self.assertEqual([p["is_editable"] for p in marked], [True, True, False])

    def test_mark_editable_does_not_mutate_input(self) -> None:
        playlist = _playlist("a", "A")
        mark_editable([playlist], user_id="me")
        self.assertNotIn("is_editable", playlist)

    def test_sort_by_name_ignores_case(self) -> None:
        names = [p["name"] for p in sort_by_name([_playlist("1", "beta"), _playlist("2", "Alpha"), _playlist("3", "gamma")])]
        self.assertEqual(names, ["Alpha", "beta", "gamma"])

    def test_categorize_splits_owned_and_collaborative(self) -> None:
        owned, collaborative = categorize_playlists(
            [_playlist("z", "Zed"), _playlist("c", "Shared", owner="other", collaborative=True), _playlist("a", "Abc")],
            user_id="me",
        )
        self.assertEqual([p["id"] for p in owned], ["a", "z"])
        self.assertEqual([p["id"] for p in collaborative], ["c"])

    def test_folder_structure_from_names(self) -> None:
        structure = build_folder_structure([
            _playlist("1", "Moods / Chill"),
            _playlist("2", "zebra"),
            _playlist("3", "Moods: Focus"),
            _playlist("4", "Apple"),
            _playlist("5", "Workout | Run"),
        ])

        root = structure["root_items"]
        self.assertEqual([(item["type"], item["name"]) for item in root], [
            ("folder", "Moods"),
            ("folder", "Workout"),
            ("playlist", "Apple"),
            ("playlist", "zebra"),
        ])
        self.assertEqual(root[0]["id"], "folder-moods")
        self.assertEqual([child["name"] for child in root[0]["children"]], ["Chill", "Focus"])
        self.assertEqual(len(structure["all_playlists"]), 5)
        self.assertEqual(root[0]["children"][0]["playlist"]["name"], "Moods / Chill")

    def test_duplicates(self) -> None:
        items = [_item("a"), _item("b"), _item("a"), _item("c")]
        self.assertTrue(has_duplicates(items))
        purged = purge_duplicates(items)
        self.assertEqual([i["track"]["id"] for i in purged], ["a", "b", "c"])
        self.assertFalse(has_duplicates(purged))

    def test_track_uris_skip_items_without_uri(self) -> None:
        items = [_item("a"), {"track": None}, _item("b")]
        self.assertEqual(track_uris(items), ["spotify:track:a", "spotify:track:b"])

    def test_move_track(self) -> None:
        items = [_item("a"), _item("b"), _item("c")]
        self.assertEqual([i["track"]["id"] for i in move_track(items, 0, 2)], ["b", "c", "a"])
        self.assertEqual([i["track"]["id"] for i in move_track(items, 5, 0)], ["a", "b", "c"])
        self.assertEqual([i["track"]["id"] for i in items], ["a", "b", "c"])


if __name__ == "__main__":
    unittest.main()
