from __future__ import annotations

from codebundle.schema import BUNDLE_OPTIONS, COMMANDS, CREATE_RSP_OPTIONS, RESPONSE_FILE_OPTIONS, OptionKind


def test_response_file_options_follow_declaration_order() -> None:
    assert RESPONSE_FILE_OPTIONS == (
        "--language",
        "--output",
        "--note",
        "--sort",
        "--remove-empty-lines",
        "--author",
    )


def test_bundle_required_options() -> None:
    required = {spec.name for spec in BUNDLE_OPTIONS if spec.required}

    assert required == {"language", "output"}


def test_create_rsp_requires_output_only() -> None:
    assert [(spec.name, spec.required) for spec in CREATE_RSP_OPTIONS] == [("output", True)]


def test_option_strings_and_dest() -> None:
    by_name = {spec.name: spec for spec in BUNDLE_OPTIONS}

    assert by_name["remove-empty-lines"].option_strings == ("-r", "--remove-empty-lines")
    assert by_name["remove-empty-lines"].dest == "remove_empty_lines"
    assert by_name["remove-empty-lines"].kind is OptionKind.FLAG
    assert by_name["sort"].default == "name"


def test_commands_are_registered_by_name() -> None:
    assert [command.name for command in COMMANDS] == ["bundle", "create-rsp"]
