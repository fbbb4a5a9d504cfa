from aws_plugin_kit.parser.paths import MISSING, get_path, has_path, split_path

RESPONSE = {
    "Reservations": [
        {"Instances": [{"InstanceId": "i-1", "State": {"Name": "running"}}]},
    ],
    "NextToken": None,
}


class TestSplitPath:
    def test_empty(self):
        assert split_path("") == []

    def test_dotted(self):
        assert split_path("a.b.c") == ["a", "b", "c"]


class TestGetPath:
    def test_empty_path_returns_data(self):
        assert get_path(RESPONSE, "") is RESPONSE

    def test_nested_mapping_and_index(self):
        assert get_path(RESPONSE, "Reservations.0.Instances.0.State.Name") == "running"

    def test_sequence_of_fields(self):
        assert get_path(RESPONSE, ["Reservations", "0", "Instances"]) == [
            {"InstanceId": "i-1", "State": {"Name": "running"}}
        ]

    def test_missing_key(self):
        assert get_path(RESPONSE, "Reservations.0.Nope") is MISSING

    def test_index_out_of_range(self):
        assert get_path(RESPONSE, "Reservations.5") is MISSING

    def test_through_scalar(self):
        assert get_path(RESPONSE, "Reservations.0.Instances.0.InstanceId.length") is MISSING

    def test_present_none_value(self):
        assert get_path(RESPONSE, "NextToken") is None
        assert has_path(RESPONSE, "NextToken") is True
        assert has_path(RESPONSE, "Missing") is False
