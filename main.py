import argparse
import logging
import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import config, web_remote
from app import SequencePlayer, options_from_config
from logging_utils import setup_logging
from playback import PlayMode

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play a numbered image sequence as an animation")
    p.add_argument("sequence_path", nargs="?", default=config.SEQUENCE_PATH,
                   help=f"path prefix of the frame files (default: {config.SEQUENCE_PATH})")
    p.add_argument("--start", type=int, default=config.SEQUENCE_START, help="first frame index")
    p.add_argument("--end", type=int, default=config.SEQUENCE_END, help="last frame index")
    p.add_argument("--ext", default=config.FILE_EXTENSION, help="file extension, with dot")
    p.add_argument("--mode", type=str.upper, choices=[m.value for m in PlayMode],
                   default=config.PLAY_MODE)
    p.add_argument("--fps", type=float, default=config.SEQUENCE_FPS,
                   help="sequence frames per second in AUTO mode")
    p.add_argument("--paused", action="store_true", default=config.START_PAUSED)
    p.add_argument("--play-once", action="store_true", default=config.PLAY_ONCE)
    p.add_argument("--fit", choices=["stretch", "contain"], default=config.FRAME_FIT)
    p.add_argument("--fullscreen", action="store_true", default=config.FULLSCREEN)
    p.add_argument("--no-web", action="store_true", help="do not start the web remote")
    p.add_argument("--port", type=int, default=config.WEB_PORT)
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   default=config.LOG_LEVEL)
    p.add_argument("--log-file", default=config.LOG_FILE)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    config.LOG_FILE = args.log_file
    config.FULLSCREEN = args.fullscreen
    setup_logging(args.log_level, args.log_file)

    opts = options_from_config(
        sequence_path=args.sequence_path,
        sequence_start=args.start,
        sequence_end=args.end,
        file_extension=args.ext,
        mode=args.mode,
        fps=args.fps,
        start_paused=args.paused,
        play_once=args.play_once,
        fit=args.fit,
    )
    player = SequencePlayer(opts)
    if config.WEB_REMOTE and not args.no_web:
        web_remote.start(player, args.port)  # player = current SequencePlayer instance
    player.run()


if __name__ == "__main__":
    main()
