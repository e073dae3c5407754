import os
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError
from src.libs.storage.category import (
    AudioValidationConfig,
    CategoryConfig,
    ImageValidationConfig,
    PDFValidationConfig,
    PreviewConfig,
    ValidationConfig,
    VideoValidationConfig,
    default_category_config,
)
from src.libs.storage.exceptions import FileTooLargeError, InvalidConfigError, InvalidFileError, UnsupportedTypeError
from src.libs.storage.security import SecurityConfig

POPULATED_MEDIA_BLOCKS = [
    ImageValidationConfig(
        min_width=100,
        max_width=2048,
        min_height=100,
        max_height=2048,
        min_quality=60,
        max_quality=95,
        allowed_formats=("jpeg", "png"),
        min_aspect_ratio=0.5,
        max_aspect_ratio=2.0,
        allowed_color_spaces=("RGB", "RGBA"),
    ),
    PDFValidationConfig(
        validate_structure=True,
        min_pages=1,
        max_pages=200,
        require_metadata=True,
        required_fields=("title", "author"),
        allow_password=True,
        allow_scripts=True,
    ),
    VideoValidationConfig(
        min_duration=1,
        max_duration=600,
        min_width=320,
        max_width=3840,
        min_height=240,
        max_height=2160,
        allowed_codecs=("h264", "vp9"),
        min_frame_rate=24,
        max_frame_rate=60,
    ),
    AudioValidationConfig(
        min_duration=1,
        max_duration=3600,
        min_bitrate=64,
        max_bitrate=320,
        allowed_formats=("mp3", "flac"),
        min_sample_rate=22050,
        max_sample_rate=96000,
    ),
]


class TestCategoryValidateConfig:
    """Test cases for CategoryConfig.validate_config"""

    @pytest.mark.parametrize("max_size", [1, 1024, 5_242_880])
    def test_valid_category_passes(self, max_size):
        """Test that a suffix and a positive size are all that is required."""
        config = CategoryConfig(bucket_suffix="avatars", max_size=max_size)

        assert config.validate_config() is None

    def test_empty_bucket_suffix_is_rejected(self):
        """Test that an empty bucket suffix fails with INVALID_CONFIG."""
        config = CategoryConfig(bucket_suffix="", max_size=1024)

        with pytest.raises(InvalidConfigError) as exc_info:
            config.validate_config()

        assert exc_info.value.code == "INVALID_CONFIG"
        assert "BucketSuffix" in exc_info.value.message

    @pytest.mark.parametrize("max_size", [0, -1, -5_242_880])
    def test_non_positive_max_size_is_rejected(self, max_size):
        """Test that zero and negative sizes fail with INVALID_CONFIG."""
        config = CategoryConfig(bucket_suffix="avatars", max_size=max_size)

        with pytest.raises(InvalidConfigError) as exc_info:
            config.validate_config()

        assert exc_info.value.code == "INVALID_CONFIG"
        assert "MaxSize" in str(exc_info.value)

    def test_bucket_suffix_is_checked_first(self):
        """Test that the suffix error wins when both fields are invalid."""
        config = CategoryConfig(bucket_suffix="", max_size=0)

        with pytest.raises(InvalidConfigError, match="BucketSuffix"):
            config.validate_config()

    def test_other_fields_are_not_checked(self):
        """Test that inconsistent optional rules do not fail validation."""
        config = CategoryConfig(
            bucket_suffix="images",
            max_size=10,
            validation=ValidationConfig(
                min_file_size=5000,
                max_file_size=100,
                image_validation=ImageValidationConfig(min_quality=500, max_quality=-3),
            ),
            preview=PreviewConfig(thumbnail_sizes=("not-a-size",)),
        )

        config.validate_config()


class TestDefaultCategoryConfig:
    """Test cases for default_category_config"""

    def test_public_category_defaults(self):
        """Test the defaults for a public category."""
        config = default_category_config("avatars", True, 5_242_880)

        assert config.bucket_suffix == "avatars"
        assert config.is_public is True
        assert config.max_size == 5_242_880
        assert config.allowed_types == ()
        assert config.validation.max_file_size == 5_242_880
        assert config.validation.min_file_size == 1024
        assert config.security.require_auth is False
        assert config.security.require_owner is False
        assert config.preview.generate_thumbnails is False
        assert config.preview.enable_preview is False

    def test_private_category_requires_auth_and_owner(self):
        """Test that private categories require both authentication and ownership."""
        config = default_category_config("docs", False, 10_485_760)

        assert config.security.require_auth is True
        assert config.security.require_owner is True
        assert config.validation.max_file_size == 10_485_760

    def test_defaults_are_not_validated(self):
        """Test that the constructor accepts values validate_config rejects."""
        config = default_category_config("", False, 0)

        with pytest.raises(InvalidConfigError):
            config.validate_config()

    def test_configs_are_immutable(self):
        """Test that variants are derived by copying, not mutation."""
        config = default_category_config("avatars", True, 1024)

        with pytest.raises(ValidationError):
            config.max_size = 2048

        variant = config.model_copy(update={"max_size": 2048})
        assert variant.max_size == 2048
        assert config.max_size == 1024


class TestCategorySerialization:
    """Test cases for the JSON shape of category configs"""

    def test_zero_values_are_omitted(self):
        """Test that only required keys and populated values are emitted."""
        data = default_category_config("avatars", True, 5_242_880).to_dict()

        assert data == {
            "bucket_suffix": "avatars",
            "is_public": True,
            "max_size": 5_242_880,
            "allowed_types": [],
            "validation": {"max_file_size": 5_242_880, "min_file_size": 1024},
        }

    def test_private_category_emits_security(self):
        """Test that a populated security block is emitted with snake_case keys."""
        data = default_category_config("docs", False, 1024).to_dict()

        assert data["security"] == {"require_auth": True, "require_owner": True}
        assert "preview" not in data
        assert "middlewares" not in data

    @pytest.mark.parametrize("media", POPULATED_MEDIA_BLOCKS, ids=lambda block: block.wire_key)
    def test_round_trip_preserves_populated_fields(self, media):
        """Test that encoding then decoding yields an equal config for every media block."""
        config = CategoryConfig(
            bucket_suffix="images",
            is_public=False,
            max_size=5 * 1024 * 1024,
            allowed_types=("image/jpeg", "image/png"),
            validation=ValidationConfig(
                max_file_size=5 * 1024 * 1024,
                min_file_size=1024,
                allowed_extensions=(".jpg", ".png"),
                media=media,
            ),
            middlewares=("security", "validation"),
            security=SecurityConfig(require_auth=True, require_role=("editor",), presigned_url_expiry=3600),
            preview=PreviewConfig(
                generate_thumbnails=True,
                thumbnail_sizes=("150x150",),
                use_cdn=True,
                cdn_endpoint="https://cdn.example.com",
            ),
        )

        decoded = CategoryConfig.from_json(config.to_json())

        assert decoded == config
        assert decoded.validation.media == media
        assert len(config.to_dict()["validation"][media.wire_key]) == len(type(media).model_fields)

    def test_decode_fills_missing_fields_with_zero_values(self):
        """Test that omitted keys decode to their zero value and unknown keys are ignored."""
        config = CategoryConfig.from_dict({"bucket_suffix": "files", "max_size": 10, "unknown": "ignored"})

        assert config.is_public is False
        assert config.allowed_types == ()
        assert config.validation == ValidationConfig()
        assert config.security == SecurityConfig()
        assert config.preview == PreviewConfig()

    def test_decode_uses_wire_keys(self):
        """Test decoding a document written by an external producer."""
        config = CategoryConfig.from_json(
            """
            {
                "bucket_suffix": "clips",
                "is_public": true,
                "max_size": 104857600,
                "allowed_types": ["video/mp4"],
                "validation": {"video_validation": {"max_duration": 600, "allowed_codecs": ["h264"]}},
                "preview": {"use_cdn": true, "cdn_endpoint": "https://cdn.example.com"}
            }
            """
        )

        assert isinstance(config.validation.media, VideoValidationConfig)
        assert config.validation.media.max_duration == 600
        assert config.validation.media.allowed_codecs == ("h264",)
        assert config.preview.cdn_endpoint == "https://cdn.example.com"

    def test_accepts(self):
        """Test content type acceptance with and without a type list."""
        open_category = CategoryConfig(bucket_suffix="any", max_size=1)
        images = CategoryConfig(bucket_suffix="images", max_size=1, allowed_types=("image/png",))

        assert open_category.accepts("application/zip") is True
        assert images.accepts("image/png") is True
        assert images.accepts("IMAGE/PNG; charset=binary") is True
        assert images.accepts("image/jpeg") is False

    def test_accepts_normalizes_configured_types(self):
        """Test that configured types match regardless of case and parameters."""
        category = CategoryConfig(bucket_suffix="images", max_size=1, allowed_types=("Image/PNG", "image/jpeg; q=1"))

        assert category.accepts("image/png") is True
        assert category.accepts("image/jpeg") is True
        assert category.accepts("image/gif") is False


class TestMediaValidationBlock:
    """Test cases for the media specific validation variant"""

    @pytest.mark.parametrize(
        "key,block_class",
        [
            ("image_validation", ImageValidationConfig),
            ("pdf_validation", PDFValidationConfig),
            ("video_validation", VideoValidationConfig),
            ("audio_validation", AudioValidationConfig),
        ],
    )
    def test_wire_key_selects_block(self, key, block_class):
        """Test that each wire key decodes into its block class and back."""
        validation = ValidationConfig.from_dict({key: {}})

        assert isinstance(validation.media, block_class)
        assert validation.to_dict() == {key: {}}

    def test_more_than_one_block_is_rejected(self):
        """Test that two media blocks cannot be combined."""
        with pytest.raises(ValidationError, match="At most one media validation block"):
            ValidationConfig.from_dict({"image_validation": {"min_width": 1}, "pdf_validation": {"min_pages": 1}})

    def test_raw_media_dict_is_rejected(self):
        """Test that raw data must name its block through a wire key."""
        with pytest.raises(ValidationError, match="media must be a validation block instance"):
            ValidationConfig(media={})

        with pytest.raises(ValidationError, match="media must be a validation block instance"):
            ValidationConfig.from_dict({"media": {"max_pages": 10}})

    def test_media_block_instance_is_kept(self):
        validation = ValidationConfig(media=PDFValidationConfig())

        assert isinstance(validation.media, PDFValidationConfig)
        assert validation.to_dict() == {"pdf_validation": {}}

    def test_null_blocks_are_ignored(self):
        """Test that explicit nulls count as absent."""
        validation = ValidationConfig.from_dict({"image_validation": None, "audio_validation": {"max_bitrate": 320}})

        assert isinstance(validation.media, AudioValidationConfig)
        assert validation.media.max_bitrate == 320

    def test_no_block(self):
        """Test that validation without a media block emits none."""
        validation = ValidationConfig(max_file_size=10)

        assert validation.media is None
        assert validation.to_dict() == {"max_file_size": 10}

    def test_media_rule_matches_family(self):
        """Test that a block only applies to content types of its family."""
        validation = ValidationConfig(pdf_validation=PDFValidationConfig(max_pages=10))

        assert validation.media_rule_for("application/pdf") == PDFValidationConfig(max_pages=10)
        assert validation.media_rule_for("image/png") is None
        assert validation.media_rule_for("text/plain") is None
        assert ValidationConfig().media_rule_for("application/pdf") is None


class TestCheckUpload:
    """Test cases for ValidationConfig.check_upload"""

    def setup_method(self):
        """Create a validation config shared by the tests."""
        self.validation = ValidationConfig(
            max_file_size=5000,
            min_file_size=100,
            allowed_types=("image/jpeg", "image/png"),
            allowed_extensions=(".jpg", "PNG"),
            image_validation=ImageValidationConfig(max_width=2048),
        )

    def test_accepted_upload_returns_media_rule(self):
        """Test that an accepted image returns the image block."""
        rule = self.validation.check_upload("photo.JPG", 1000, "image/jpeg")

        assert rule == ImageValidationConfig(max_width=2048)

    def test_extension_without_dot_is_normalised(self):
        """Test that configured extensions match with or without a dot."""
        assert self.validation.check_upload("photo.png", 1000, "image/png") is not None

    def test_too_large(self):
        with pytest.raises(FileTooLargeError) as exc_info:
            self.validation.check_upload("photo.jpg", 5001, "image/jpeg")

        assert exc_info.value.code == "FILE_TOO_LARGE"

    def test_too_small(self):
        with pytest.raises(InvalidFileError) as exc_info:
            self.validation.check_upload("photo.jpg", 99, "image/jpeg")

        assert exc_info.value.code == "INVALID_FILE"

    def test_configured_types_are_normalized(self):
        validation = ValidationConfig(allowed_types=("Image/PNG",))

        assert validation.check_upload("photo.png", 10, "image/png") is None

        with pytest.raises(UnsupportedTypeError):
            validation.check_upload("photo.gif", 10, "image/gif")

    def test_type_not_allowed(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            self.validation.check_upload("photo.jpg", 1000, "image/gif")

        assert exc_info.value.code == "UNSUPPORTED_TYPE"
        assert "image/jpeg" in exc_info.value.to_dict()["details"]

    def test_extension_not_allowed(self):
        with pytest.raises(UnsupportedTypeError, match="extension .jpeg"):
            self.validation.check_upload("photo.jpeg", 1000, "image/jpeg")

    def test_unrestricted_validation_accepts_anything(self):
        """Test that zero limits and empty lists disable every check."""
        assert ValidationConfig().check_upload("archive", 0, "application/zip") is None


class TestPreviewConfig:
    """Test cases for PreviewConfig"""

    def test_thumbnail_dimensions(self):
        preview = PreviewConfig(thumbnail_sizes=("150x150", "300X200"))

        assert preview.thumbnail_dimensions() == [(150, 150), (300, 200)]

    def test_malformed_thumbnail_size(self):
        preview = PreviewConfig(thumbnail_sizes=("150",))

        with pytest.raises(InvalidConfigError, match="WxH"):
            preview.thumbnail_dimensions()


class TestCategoryImport:
    """Test cases for using category configs without application settings"""

    def test_import_does_not_load_settings(self, tmp_path: Path):
        """Test that categories work in production even while the settings are invalid."""
        script = (
            "from src.core.config import get_settings\n"
            "from src.libs.storage.category import default_category_config\n"
            "config = default_category_config('avatars', False, 1024)\n"
            "config.validate_config()\n"
            "print(config.bucket_suffix)\n"
            "try:\n"
            "    get_settings()\n"
            "except ValueError:\n"
            "    print('settings rejected')\n"
        )
        env = {key: value for key, value in os.environ.items() if not key.startswith("STORAGE_")}
        env["ENVIRONMENT"] = "production"
        env["PYTHONPATH"] = str(Path(__file__).resolve().parents[3])

        result = subprocess.run(
            [sys.executable, "-c", script], cwd=tmp_path, env=env, capture_output=True, text=True, check=False
        )

        assert result.returncode == 0, result.stderr
        assert result.stdout.split() == ["avatars", "settings", "rejected"]
