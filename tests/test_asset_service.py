import os

import pytest

from services.asset_service import (
    DEFAULT_FONT,
    Provenance,
    all_templates,
    delete_emoji,
    delete_user_template,
    font_display_name,
    list_emojis,
    list_fonts,
    list_templates,
)
from utils.errors import NotFoundError, ValidationError


def test_list_templates_filters_and_groups(store, put_file):
    put_file("templates/base/flower.png")
    put_file("templates/base/readme.txt", b"x")
    put_file("templates/user/1-2.jpg")

    groups = list_templates(store)

    assert [t.name for t in groups["base"]] == ["flower.png"]
    assert groups["base"][0].provenance is Provenance.BUILTIN
    assert groups["base"][0].to_dict() == {
        "name": "flower.png", "path": "/templates/base/flower.png", "type": "base"
    }
    assert groups["user"][0].to_dict()["type"] == "user"


def test_all_templates_order_is_stable(store, put_file):
    put_file("templates/user/b.png")
    put_file("templates/base/z.png")
    put_file("templates/base/a.gif")

    names = [t.name for t in all_templates(store)]
    assert names == ["a.gif", "z.png", "b.png"]
    assert [t.name for t in all_templates(store)] == names


def test_list_emojis_newest_first(store, put_file):
    old = put_file("emojis/old.png")
    new = put_file("emojis/new.webp")
    put_file("emojis/notes.txt", b"x")
    os.utime(old, (1_000_000, 1_000_000))
    os.utime(new, (2_000_000, 2_000_000))

    emojis = list_emojis(store)

    assert [e["filename"] for e in emojis] == ["new.webp", "old.png"]
    assert emojis[0]["path"] == "/emojis/new.webp"
    assert emojis[0]["size"] == new.stat().st_size
    assert "uploadTime" in emojis[0]


@pytest.mark.parametrize(
    "filename,expected",
    [("思源黑体.ttf", "思源黑体"), ("站酷快乐体(商用需授权).otf", "站酷快乐体"), ("Roboto.woff2", "Roboto")],
)
def test_font_display_name(filename, expected):
    assert font_display_name(filename) == expected


def test_list_fonts_default_first(store, put_file):
    put_file("fonts/Roboto.woff", b"f")
    put_file("fonts/cover.png")

    fonts = list_fonts(store)

    assert fonts[0] == DEFAULT_FONT
    assert fonts[1] == {
        "name": "Roboto", "filename": "Roboto.woff", "path": "/fonts/Roboto.woff", "displayName": "Roboto"
    }
    assert len(fonts) == 2


def test_delete_user_template(store, put_file):
    path = put_file("templates/user/123-456.png")
    delete_user_template(store, "123-456.png")
    assert not path.exists()

    with pytest.raises(NotFoundError):
        delete_user_template(store, "123-456.png")


def test_delete_rejects_unsafe_names(store):
    with pytest.raises(ValidationError):
        delete_user_template(store, "../../app.py")
    with pytest.raises(ValidationError):
        delete_emoji(store, "")


def test_delete_emoji(store, put_file):
    put_file("emojis/smile.gif")
    delete_emoji(store, "smile.gif")
    assert store.list("emojis") == []
