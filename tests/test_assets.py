"""Tests for node and model entry parsing."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from comfysync.models.assets import ModelEntry, ModelSource, NodeEntry, parse_list


def test_parse_list_skips_blank_and_comment_lines() -> None:
    text = """
    https://github.com/a/one.git

    # disabled for now
      https://github.com/b/two.git
    """
    assert parse_list(text) == ["https://github.com/a/one.git", "https://github.com/b/two.git"]


def test_parse_list_pipe_separator() -> None:
    assert parse_list("echo one | | echo two|#skip", separator="|") == ["echo one", "echo two"]


def test_parse_list_none_and_list_input() -> None:
    assert parse_list(None) == []
    assert parse_list(["  a ", "", "# c", "b"]) == ["a", "b"]


@pytest.mark.parametrize(
    ("url", "name"),
    [
        ("https://github.com/ltdrdata/ComfyUI-Manager.git", "ComfyUI-Manager"),
        ("https://github.com/rgthree/rgthree-comfy", "rgthree-comfy"),
        ("https://github.com/cubiq/ComfyUI_essentials.git/", "ComfyUI_essentials"),
        ("git@github.com:owner/some-node.git", "some-node"),
    ],
)
def test_node_entry_name(url: str, name: str) -> None:
    assert NodeEntry.parse(url).name == name


def test_url_entry_with_explicit_filename() -> None:
    entry = ModelEntry.parse("url:https://host/file.bin:out.bin")
    assert entry.kind is ModelSource.URL
    assert entry.fetch_url == "https://host/file.bin"
    assert entry.target_filename == "out.bin"


def test_url_entry_without_filename_uses_basename() -> None:
    entry = ModelEntry.parse("url:https://host/file.bin")
    assert entry.fetch_url == "https://host/file.bin"
    assert entry.filename is None
    assert entry.target_filename == "file.bin"


def test_scheme_tag_reconstructs_same_url() -> None:
    split = ModelEntry.parse("https:example.com/m.bin::model.bin")
    full = ModelEntry.parse("url:https://example.com/m.bin:model.bin")

    assert split.source == "https"
    assert split.fetch_url == full.fetch_url == "https://example.com/m.bin"
    assert split.target_filename == full.target_filename == "model.bin"


def test_scheme_tag_with_slashes_kept() -> None:
    entry = ModelEntry.parse("http://example.com/dir/m.safetensors")
    assert entry.fetch_url == "http://example.com/dir/m.safetensors"
    assert entry.target_filename == "m.safetensors"


def test_url_with_port_is_not_split() -> None:
    entry = ModelEntry.parse("url:http://mirror.local:8080/models/x.ckpt")
    assert entry.fetch_url == "http://mirror.local:8080/models/x.ckpt"
    assert entry.target_filename == "x.ckpt"


def test_url_basename_ignores_query_string() -> None:
    entry = ModelEntry.parse("url:https://host/files/lora.safetensors?download=true")
    assert entry.target_filename == "lora.safetensors"


def test_hf_entry_hub_location() -> None:
    entry = ModelEntry.parse("hf:acme/demo/weights.bin:demo.bin")
    assert entry.kind is ModelSource.HUGGINGFACE
    assert entry.hub_location() == ("acme/demo", "weights.bin")
    assert entry.target_path(Path("/m")) == Path("/m/demo.bin")


def test_hf_entry_nested_path_and_default_filename() -> None:
    entry = ModelEntry.parse("huggingface:owner/repo/split_files/vae/ae.safetensors")
    assert entry.hub_location() == ("owner/repo", "split_files/vae/ae.safetensors")
    assert entry.target_filename == "ae.safetensors"


def test_hf_entry_repo_only_uses_filename_inside_repo() -> None:
    entry = ModelEntry.parse("hf:owner/repo:model.safetensors")
    assert entry.hub_location() == ("owner/repo", "model.safetensors")


def test_civitai_entry() -> None:
    entry = ModelEntry.parse("civitai:1413921:Uncanny_Valley.safetensors")
    assert entry.kind is ModelSource.CIVITAI
    assert entry.identifier == "1413921"
    assert entry.target_filename == "Uncanny_Valley.safetensors"


def test_trailing_separator_means_no_filename() -> None:
    entry = ModelEntry.parse("hf:owner/repo/file.bin:")
    assert entry.identifier == "owner/repo/file.bin"
    assert entry.filename is None
    assert entry.target_filename == "file.bin"


def test_unknown_source_is_parsed_without_kind() -> None:
    entry = ModelEntry.parse("s3:bucket/key.bin")
    assert entry.kind is None
    assert entry.target_filename == "key.bin"


def test_source_tag_is_case_insensitive() -> None:
    assert ModelEntry.parse("HF:owner/repo/file.bin").kind is ModelSource.HUGGINGFACE


def test_mapping_entry() -> None:
    entry = ModelEntry.parse({"source": "civitai", "identifier": "652659", "filename": "pony_lcm.safetensors"})
    assert entry.target_filename == "pony_lcm.safetensors"


@pytest.mark.parametrize(
    "line",
    [
        "no-separator-here",
        "hf:",
        "civitai::name.safetensors",
        {"source": "url", "identifier": "https://host/f.bin", "filename": "../escape.bin"},
        "url:https://host/..",
        "https://host/models/.",
        "hf:org/repo/..",
    ],
)
def test_invalid_entries_rejected(line: str | dict[str, str]) -> None:
    with pytest.raises((ValueError, ValidationError)):
        ModelEntry.parse(line)
