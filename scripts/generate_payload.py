"""
Write an /api/upload request body (payload.json) for a local image file.

Usage: python scripts/generate_payload.py <path_to_image> [folder] [tags]
"""
import base64
import json
import sys
import os


def create_payload(image_path, folder=None, tags=None):
    if not os.path.exists(image_path):
        print(f"Error: File '{image_path}' not found.")
        return 1

    with open(image_path, "rb") as image_file:
        encoded_string = base64.b64encode(image_file.read()).decode('utf-8')

    payload = {
        "image_data": encoded_string,
        "filename": os.path.basename(image_path),
    }
    if folder:
        payload["folder"] = folder
    if tags:
        payload["tags"] = tags

    output_file = "payload.json"
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    print(f"✓ Payload written to {output_file}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/generate_payload.py <path_to_image> [folder] [tags]")
        sys.exit(1)

    sys.exit(create_payload(*sys.argv[1:4]))
