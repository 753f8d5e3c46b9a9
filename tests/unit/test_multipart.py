"""Unit tests for multipart construction of upload calls.

Covers:
- Validation of the file field (missing, invalid, file ids, list labels).
- Part layout for single files, lists and media groups.
- attach:// references always resolving to exactly one sibling part.
"""

import json

import pytest

from telegram_bot_http import InputFile, InvalidInputFileEntityError, MissingUploadParamError
from telegram_bot_http.multipart import (
    CandidateKind,
    WrappedValues,
    generate_multipart_data,
    is_file_id,
    iter_input_files,
    prepare_multipart_params,
    requires_multipart,
    stringify_field,
    validate_input_file_field,
)
from tests.helpers import FILE_ID, assert_attachments_resolve, attach_tokens, read_part


class TestWrappedValues:
    """Single-versus-list shape tracking"""

    @pytest.mark.unit
    def test_single_value_is_promoted_and_collapsed_back(self):
        """Should promote a single value and collapse it back"""
        wrapped = WrappedValues.wrap({"type": "photo"})

        assert wrapped.items == ({"type": "photo"},)
        assert wrapped.was_list is False
        assert wrapped.unwrap(["x"]) == "x"

    @pytest.mark.unit
    def test_list_value_keeps_list_shape(self):
        """Should keep a list as a list"""
        wrapped = WrappedValues.wrap([1, 2])

        assert wrapped.items == (1, 2)
        assert wrapped.was_list is True
        assert wrapped.unwrap(("a", "b")) == ["a", "b"]


class TestFileIdRecognition:
    """File identifier shorthand"""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        [FILE_ID, "BQACAgIAAxkBAAIBZGZk7Q9f-abc_123", f"  {FILE_ID}  "],
    )
    def test_accepts_platform_ids(self, value):
        """Should recognize platform file ids"""
        assert is_file_id(value)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        [
            "not-a-file-and-not-an-id-object",
            "/tmp/a.jpg",
            "https://example.com/a.jpg",
            "Short1A",
            "photo.jpg",
            12345678901234567890,
            None,
        ],
    )
    def test_rejects_paths_urls_and_non_strings(self, value):
        """Should not mistake paths, URLs or non-strings for file ids"""
        assert not is_file_id(value)


class TestValidation:
    """File field validation before any I/O"""

    @pytest.mark.unit
    def test_missing_field_raises(self):
        """Should raise MissingUploadParamError when the file field is absent"""
        with pytest.raises(MissingUploadParamError) as exc_info:
            validate_input_file_field({"chat_id": 1}, "photo")

        assert exc_info.value.field == "photo"

    @pytest.mark.unit
    def test_none_field_counts_as_missing(self):
        """Should treat a None file field as missing"""
        with pytest.raises(MissingUploadParamError):
            validate_input_file_field({"photo": None}, "photo")

    @pytest.mark.unit
    def test_plain_string_is_not_an_input_file(self):
        """Should reject a string that is neither a file id nor an InputFile"""
        with pytest.raises(InvalidInputFileEntityError) as exc_info:
            validate_input_file_field(
                {"photo": "not-a-file-and-not-an-id-object"}, "photo"
            )

        assert exc_info.value.field == "photo"

    @pytest.mark.unit
    def test_paths_must_be_wrapped_in_input_file(self, photo_path):
        """Should reject a bare path string"""
        with pytest.raises(InvalidInputFileEntityError):
            validate_input_file_field({"photo": str(photo_path)}, "photo")

    @pytest.mark.unit
    def test_list_items_are_labelled_with_their_index(self, photo_path):
        """Should label an invalid list item with its index"""
        params = {"photo": [InputFile.from_path(photo_path), 42]}

        with pytest.raises(InvalidInputFileEntityError) as exc_info:
            validate_input_file_field(params, "photo")

        assert exc_info.value.field == "photo #1"

    @pytest.mark.unit
    def test_media_items_are_checked_on_their_nested_media_key(self):
        """Should validate the nested media value of each media item"""
        params = {
            "media": [
                {"type": "photo", "media": FILE_ID},
                {"type": "photo", "media": "https://example.com/b.jpg"},
            ]
        }

        with pytest.raises(InvalidInputFileEntityError) as exc_info:
            validate_input_file_field(params, "media")

        assert exc_info.value.field == "media #1"

    @pytest.mark.unit
    def test_media_item_without_media_key_is_invalid(self):
        """Should reject a media item without a media value"""
        with pytest.raises(InvalidInputFileEntityError):
            validate_input_file_field({"media": {"type": "photo"}}, "media")

    @pytest.mark.unit
    def test_validation_is_repeatable(self, photo_path):
        """Should give the same outcome and label when validated twice"""
        bad = {"photo": [InputFile.from_path(photo_path), "nope"]}
        good = {"photo": InputFile.from_path(photo_path)}

        labels = []
        for _ in range(2):
            with pytest.raises(InvalidInputFileEntityError) as exc_info:
                validate_input_file_field(bad, "photo")
            labels.append(exc_info.value.field)
        first = validate_input_file_field(good, "photo")
        second = validate_input_file_field(good, "photo")

        assert labels == ["photo #1", "photo #1"]
        assert first == second

    @pytest.mark.unit
    def test_classifies_ids_and_files(self, photo_path):
        """Should classify file ids and InputFiles once"""
        photo = InputFile.from_path(photo_path)

        candidates = validate_input_file_field({"photo": [FILE_ID, photo]}, "photo")

        assert [c.kind for c in candidates] == [
            CandidateKind.FILE_ID,
            CandidateKind.INPUT_FILE,
        ]
        assert candidates[1].value is photo
        assert requires_multipart(candidates)
        assert not requires_multipart(candidates[:1])

    @pytest.mark.unit
    def test_input_file_in_another_field_requires_multipart(self):
        """Should require multipart when another field holds an InputFile"""
        thumb = InputFile.from_bytes(b"t", filename="t.jpg")
        params = {"video": FILE_ID, "thumbnail": thumb}

        candidates = validate_input_file_field(params, "video")

        assert not requires_multipart(candidates)
        assert requires_multipart(candidates, params)
        assert not requires_multipart(candidates, {"video": FILE_ID, "caption": "x"})

    @pytest.mark.unit
    def test_iter_input_files_searches_nested_values(self):
        """Should find InputFiles inside nested mappings and lists"""
        first = InputFile.from_bytes(b"1", filename="1.jpg")
        second = InputFile.from_bytes(b"2", filename="2.jpg")

        found = list(iter_input_files({"a": [{"media": first}], "b": (1, second), "c": "x"}))

        assert found == [first, second]


class TestPrepareMultipartParams:
    """Part list construction"""

    @pytest.mark.unit
    def test_single_photo_upload(self, photo_path):
        """Should put scalar parts first, then the file under the field name"""
        parts = prepare_multipart_params(
            {"chat_id": 1, "photo": InputFile.from_path(photo_path)}, "photo"
        )

        assert [p.name for p in parts] == ["chat_id", "photo"]
        assert parts[0].contents == "1"
        assert parts[0].filename is None
        assert parts[1].filename == "a.jpg"
        assert read_part(parts[1]) == photo_path.read_bytes()

    @pytest.mark.unit
    def test_missing_field_fails_before_building(self):
        """Should fail before building any part"""
        with pytest.raises(MissingUploadParamError):
            prepare_multipart_params({"chat_id": 1}, "photo")

    @pytest.mark.unit
    def test_none_values_are_dropped(self, photo_path):
        """Should drop None parameters"""
        parts = prepare_multipart_params(
            {"chat_id": 1, "caption": None, "photo": InputFile.from_path(photo_path)},
            "photo",
        )

        assert [p.name for p in parts] == ["chat_id", "photo"]

    @pytest.mark.unit
    def test_single_and_wrapped_file_give_the_same_parts(self, photo_path):
        """Should build the same parts for a file and a one-item list"""
        photo = InputFile.from_path(photo_path)

        single = prepare_multipart_params({"chat_id": 1, "photo": photo}, "photo")
        wrapped = prepare_multipart_params({"chat_id": 1, "photo": [photo]}, "photo")

        assert single == wrapped

    @pytest.mark.unit
    def test_media_group_with_file_and_file_id(self, tmp_path):
        """Should emit one JSON media part plus one file part per InputFile"""
        x = tmp_path / "x.jpg"
        x.write_bytes(b"x-bytes")
        upload = InputFile.from_path(x)
        params = {
            "chat_id": 1,
            "media": [
                {"type": "photo", "media": upload},
                {"type": "photo", "media": FILE_ID},
            ],
        }

        parts = prepare_multipart_params(params, "media")

        assert [p.name for p in parts] == ["chat_id", "media", upload.multipart_name]
        assert json.loads(parts[1].contents) == [
            {"type": "photo", "media": f"attach://{upload.multipart_name}"},
            {"type": "photo", "media": FILE_ID},
        ]
        assert read_part(parts[2]) == b"x-bytes"
        assert parts[2].filename == "x.jpg"
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_media_group_does_not_mutate_caller_items(self, photo_path):
        """Should leave the caller's media items untouched"""
        upload = InputFile.from_path(photo_path)
        item = {"type": "photo", "media": upload, "caption": "hi"}

        prepare_multipart_params({"media": [item]}, "media")

        assert item == {"type": "photo", "media": upload, "caption": "hi"}

    @pytest.mark.unit
    def test_media_group_file_order_follows_items(self, tmp_path):
        """Should append media files in item order"""
        files = []
        for name in ("one.jpg", "two.jpg", "three.jpg"):
            (tmp_path / name).write_bytes(name.encode())
            files.append(InputFile.from_path(tmp_path / name))

        parts = prepare_multipart_params(
            {"media": [{"type": "photo", "media": f} for f in files]}, "media"
        )

        assert [p.name for p in parts[1:]] == [f.multipart_name for f in files]
        assert [read_part(p) for p in parts[1:]] == [b"one.jpg", b"two.jpg", b"three.jpg"]

    @pytest.mark.unit
    def test_media_item_thumbnail_is_attached_too(self, tmp_path):
        """Should attach a media item's thumbnail after its media"""
        video = InputFile.from_bytes(b"video", filename="v.mp4")
        thumb = InputFile.from_bytes(b"thumb", filename="t.jpg")

        parts = prepare_multipart_params(
            {"media": [{"type": "video", "media": video, "thumbnail": thumb}]}, "media"
        )

        assert [p.name for p in parts[1:]] == [video.multipart_name, thumb.multipart_name]
        assert json.loads(parts[0].contents) == [
            {"type": "video", "media": video.attach_string, "thumbnail": thumb.attach_string}
        ]
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_same_file_referenced_twice_is_sent_once(self):
        """Should send a file referenced twice only once"""
        upload = InputFile.from_bytes(b"data", filename="d.jpg")

        parts = prepare_multipart_params(
            {"media": [{"type": "photo", "media": upload}, {"type": "photo", "media": upload}]},
            "media",
        )

        assert [p.name for p in parts] == ["media", upload.multipart_name]
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_other_input_file_fields_use_attach_strings(self, photo_path):
        """Should attach InputFiles held by other fields"""
        video = InputFile.from_bytes(b"video", filename="v.mp4")
        thumb = InputFile.from_path(photo_path)

        parts = prepare_multipart_params(
            {"chat_id": 1, "video": video, "thumbnail": thumb}, "video"
        )

        assert [p.name for p in parts] == ["chat_id", "thumbnail", "video", thumb.multipart_name]
        assert parts[1].contents == thumb.attach_string
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_file_id_field_with_thumbnail_upload(self):
        """Should send the file id as text and attach the thumbnail upload"""
        thumb = InputFile.from_bytes(b"thumb", filename="t.jpg")

        parts = prepare_multipart_params(
            {"chat_id": 1, "video": FILE_ID, "thumbnail": thumb}, "video"
        )

        assert [p.name for p in parts] == ["chat_id", "video", "thumbnail", thumb.multipart_name]
        assert parts[1].contents == FILE_ID
        assert parts[2].contents == thumb.attach_string
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_input_files_nested_in_other_fields_are_attached(self):
        """Should attach InputFiles nested in other structured fields"""
        upload = InputFile.from_bytes(b"doc", filename="d.pdf")

        parts = prepare_multipart_params(
            {"video": FILE_ID, "extra": [{"type": "document", "media": upload}]}, "video"
        )

        assert [p.name for p in parts] == ["video", "extra", upload.multipart_name]
        assert json.loads(parts[1].contents) == [
            {"type": "document", "media": upload.attach_string}
        ]
        assert_attachments_resolve(parts)

    @pytest.mark.unit
    def test_file_ids_in_a_list_are_sent_as_text(self, photo_path):
        """Should send file ids from a list as text parts"""
        photo = InputFile.from_path(photo_path)

        parts = prepare_multipart_params({"photo": [FILE_ID, photo]}, "photo")

        assert [(p.name, p.filename) for p in parts] == [("photo", None), ("photo", "a.jpg")]
        assert parts[0].contents == FILE_ID

    @pytest.mark.unit
    def test_every_attach_reference_has_a_part(self, tmp_path):
        """Should back every attach reference with exactly one part"""
        uploads = [InputFile.from_bytes(bytes([i]), filename=f"{i}.jpg") for i in range(4)]
        params = {
            "chat_id": "@channel",
            "media": [{"type": "photo", "media": u, "caption": f"#{i}"} for i, u in enumerate(uploads)]
            + [{"type": "photo", "media": FILE_ID}],
        }

        parts = prepare_multipart_params(params, "media")

        assert sorted(attach_tokens(parts)) == sorted(u.multipart_name for u in uploads)
        assert_attachments_resolve(parts)


class TestGenerateMultipartData:
    """Text part contents"""

    @pytest.mark.unit
    def test_single_media_object_stays_an_object(self):
        """Should keep a single media object as an object"""
        upload = InputFile.from_bytes(b"1", filename="1.jpg")

        part = generate_multipart_data("media", {"type": "photo", "media": upload})

        assert json.loads(part.contents) == {"type": "photo", "media": upload.attach_string}

    @pytest.mark.unit
    def test_two_media_items_stay_a_list(self):
        """Should keep a media list as a list"""
        part = generate_multipart_data(
            "media",
            [{"type": "photo", "media": FILE_ID}, {"type": "video", "media": FILE_ID}],
        )

        decoded = json.loads(part.contents)
        assert isinstance(decoded, list)
        assert len(decoded) == 2

    @pytest.mark.unit
    def test_single_item_list_stays_a_list(self):
        """Should keep a one-item media list as a list"""
        part = generate_multipart_data("media", [{"type": "photo", "media": FILE_ID}])

        assert json.loads(part.contents) == [{"type": "photo", "media": FILE_ID}]

    @pytest.mark.unit
    def test_scalars_are_stringified(self):
        """Should stringify scalars and pass bytes through"""
        assert generate_multipart_data("chat_id", 1).contents == "1"
        assert generate_multipart_data("caption", "hi").contents == "hi"
        assert generate_multipart_data("disable_notification", True).contents == "true"
        assert generate_multipart_data("blob", b"\x00").contents == b"\x00"

    @pytest.mark.unit
    def test_structured_values_are_json(self):
        """Should JSON-encode structured values"""
        entities = [{"type": "bold", "offset": 0, "length": 2}]

        assert json.loads(stringify_field(entities)) == entities
        assert json.loads(stringify_field({"a": 1})) == {"a": 1}
