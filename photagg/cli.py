# -*- coding: utf-8 -*-
"""
photagg 命令行入口。

    photagg tag IMG_001.jpg IMG_002.jpg --out export --zip --csv
    photagg embed photo.jpg --title "Red car" --description "..." -k car -k red --category Travel --out tagged.jpg
    photagg show tagged.jpg
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from photagg.config import get_api_key, load_config, save_config_value
from photagg.errors import PhotaggError
from photagg.export import export_single, write_archive, write_csv_manifest
from photagg.log import get_logger
from photagg.metadata_io import embed_metadata, read_embedded_metadata
from photagg.session import PhotoSession, guess_mime_type

_log = get_logger("cli")


def _cmd_tag(args: argparse.Namespace, cfg: dict) -> int:
    from photagg.generation import GeminiMetadataGenerator

    keep_original = cfg["keep_original_filenames"] if args.keep_original is None else args.keep_original
    if args.keep_original is not None:
        save_config_value("keep_original_filenames", args.keep_original, args.config)

    session = PhotoSession(
        max_batch_size=int(cfg["max_batch_size"]),
        max_file_size=int(cfg["max_file_size_mb"]) * 1024 * 1024,
    )
    intake = session.add_files(args.files)
    for p in intake.skipped_type:
        print(f"skipped (not an image): {p}", file=sys.stderr)
    for p in intake.skipped_size:
        print(f"skipped (exceeds {cfg['max_file_size_mb']}MB limit): {p}", file=sys.stderr)
    for p in intake.skipped_missing:
        print(f"skipped (cannot read): {p}", file=sys.stderr)

    generator = GeminiMetadataGenerator(
        api_key=get_api_key() or "",
        model=cfg["gemini_model"],
        temperature=float(cfg["gemini_temperature"]),
        timeout=float(cfg["request_timeout"]),
    )
    try:
        for item in session.process_pending(generator):
            if item.error:
                print(f"FAILED {item.file_name}: {item.error}", file=sys.stderr)
            else:
                print(f"OK     {item.file_name}: {item.data.title}")
    finally:
        generator.close()

    completed = session.completed()
    if not completed:
        return 1
    out_dir = Path(args.out)
    if args.zip:
        path = write_archive(
            completed, out_dir, keep_original, folder=cfg["archive_folder"], software=cfg["software"]
        )
        print(f"archive: {path}")
    else:
        for item in completed:
            export_single(item, out_dir, keep_original, software=cfg["software"])
    if args.csv:
        print(f"csv: {write_csv_manifest(completed, out_dir)}")
    return 0


def _cmd_embed(args: argparse.Namespace, cfg: dict) -> int:
    src = Path(args.image)
    data = src.read_bytes()
    out = embed_metadata(
        data,
        args.title,
        args.description,
        args.keyword or [],
        args.category,
        mime_type=guess_mime_type(src),
        software=cfg["software"],
    )
    if out is data:
        print("metadata not embedded (see log)", file=sys.stderr)
    Path(args.out).write_bytes(out)
    return 0


def _cmd_show(args: argparse.Namespace, cfg: dict) -> int:
    rec = read_embedded_metadata(Path(args.image).read_bytes())
    print(json.dumps(rec, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="photagg", description="AI stock-photo tagging and metadata embedding")
    ap.add_argument("--config", default=None, help="Path to photagg.json (default: user config dir)")
    sub = ap.add_subparsers(dest="command", required=True)

    tag = sub.add_parser("tag", help="Generate metadata with Gemini and export tagged photos")
    tag.add_argument("files", nargs="+", help="Image files to tag")
    tag.add_argument("--out", required=True, help="Output directory")
    tag.add_argument("--zip", action="store_true", help="Export one zip archive instead of single files")
    tag.add_argument("--csv", action="store_true", help="Also write the CSV manifest")
    keep = tag.add_mutually_exclusive_group()
    keep.add_argument("--keep-original", dest="keep_original", action="store_true", default=None,
                      help="Use original filenames (remembered in config)")
    keep.add_argument("--title-names", dest="keep_original", action="store_false",
                      help="Name files after their generated title (remembered in config)")
    tag.set_defaults(func=_cmd_tag, keep_original=None)

    embed = sub.add_parser("embed", help="Embed given metadata into one JPEG")
    embed.add_argument("image")
    embed.add_argument("--title", required=True)
    embed.add_argument("--description", required=True)
    embed.add_argument("-k", "--keyword", action="append", help="Keyword (repeatable)")
    embed.add_argument("--category", default=None)
    embed.add_argument("--out", required=True, help="Output file")
    embed.set_defaults(func=_cmd_embed)

    show = sub.add_parser("show", help="Print embedded EXIF/XMP metadata as JSON")
    show.add_argument("image")
    show.set_defaults(func=_cmd_show)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    try:
        return args.func(args, cfg)
    except PhotaggError as e:
        _log.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
