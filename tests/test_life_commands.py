from life_commands import Command, decode


def htmx_message(trigger_name: str, values: str = '"speed":"-",') -> str:
    """Message as sent by the htmx ws extension."""
    return ('{' + values + '"HEADERS":{"HX-Request":"true","HX-Trigger":"btn",'
            '"HX-Trigger-Name":"' + trigger_name + '","HX-Target":"container",'
            '"HX-Current-URL":"http://127.0.0.1:7936/"}}')


def test_speed_with_argument():
    assert decode(htmx_message("speed:-")) == Command("speed", ["-"])


def test_command_without_argument():
    assert decode(htmx_message("pause")) == Command("pause", None)
    assert decode(htmx_message("speed")) == Command("speed", None)


def test_message_without_form_values():
    assert decode(htmx_message("reset", values="")) == Command("reset")


def test_two_segments_is_no_command():
    assert decode('{"HEADERS":"HX-Trigger-Name"}') is None
    assert decode('{"HX-Trigger-Name":"pause"}') is None


def test_plain_text_is_no_command():
    assert decode("") is None
    assert decode("hello") is None


def test_non_text_is_no_command():
    assert decode(htmx_message("pause").encode("utf-8")) is None
    assert decode(None) is None


def test_missing_trigger_name():
    message = '{"a":"b","HEADERS":{"HX-Request":"true","HX-Trigger":"btn"}}'
    assert decode(message) is None


def test_trigger_name_is_case_sensitive():
    message = '{"a":"b","HEADERS":{"hx-trigger-name":"pause","HX-Request":"true"}}'
    assert decode(message) is None


def test_empty_trigger_name_is_skipped():
    message = '{"a":"b","HEADERS":{"HX-Trigger-Name":"","HX-Trigger-Name":"play","x":"y"}}'
    assert decode(message) == Command("play")

    message = '{"a":"b","HEADERS":{"HX-Trigger-Name":"","x":"y"}}'
    assert decode(message) is None


def test_first_match_wins():
    message = '{"a":"b","HEADERS":{"HX-Trigger-Name":"pause","HX-Trigger-Name":"play","x":"y"}}'
    assert decode(message) == Command("pause")


def test_entries_without_colon_are_skipped():
    message = '{"a":"b","HEADERS":{"junk","HX-Trigger-Name":"reset","x":"y"}}'
    assert decode(message) == Command("reset")


def test_argument_list_is_cut_by_entry_split():
    # Entries are split on ',' before the trigger value, so only the
    # first argument of "speed:a,b" survives
    assert decode(htmx_message("speed:a,b")) == Command("speed", ["a"])


def test_empty_argument():
    assert decode(htmx_message("speed:")) == Command("speed", [""])
