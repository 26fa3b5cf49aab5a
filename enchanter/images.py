from PIL import Image

ALLOWED_FORMATS = ['JPEG', 'PNG', 'WEBP', 'GIF']


def validate_image(image_file):
    """Checks that an uploaded file is a readable image in an allowed format."""
    try:
        with Image.open(image_file) as img:
            img.verify()  # Checks for corruption
            if img.format not in ALLOWED_FORMATS:
                return False, "Invalid format"
        return True, "Valid"
    except Exception:
        return False, "File is not a readable image"
    finally:
        if hasattr(image_file, 'seek'):
            image_file.seek(0)
