"""
CLI entry point

Converts rendered HTML/SVG scene snapshots to PowerPoint presentations
"""
import sys
import argparse
from pathlib import Path

from html2pptx.io.scene_loader import SceneLoader
from html2pptx.io.pptx_writer import PPTXWriter
from html2pptx.logger import ConversionLogger
from html2pptx.config import ConversionConfig
from html2pptx.model.intermediate import SizingMode


def main(argv=None):
    """Main function"""
    parser = argparse.ArgumentParser(
        description='Convert HTML/SVG scene snapshots to PowerPoint presentations',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  html2pptx scene.json output.pptx
  html2pptx scene.json output.pptx --sizing percent
  html2pptx scene.json output.pptx --width 13.333 --height 7.5 --title "Q3 review"
        """
    )
    parser.add_argument('input', type=str, help='Path to input scene snapshot (JSON)')
    parser.add_argument('output', type=str, help='Path to output PowerPoint file')
    parser.add_argument('--sizing', choices=[mode.value for mode in SizingMode], default=SizingMode.FIT.value,
                        help='Default sizing mode for slides that do not declare one (default: fit)')
    parser.add_argument('--width', type=float, default=None, help='Slide width in inches (default: 20)')
    parser.add_argument('--height', type=float, default=None, help='Slide height in inches (default: 11.25)')
    parser.add_argument('--presentation', action='store_true',
                        help='Skip elements marked hide-on-presentation')
    parser.add_argument('--title', type=str, default='', help='Presentation title metadata')
    parser.add_argument('--author', type=str, default='', help='Presentation author metadata')

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    output_path = Path(args.output)

    if not input_path.exists():
        print(f"Input file not found: {input_path}")
        sys.exit(1)

    print(f"Parsing: {input_path}")

    try:
        config = ConversionConfig(
            sizing_mode=SizingMode.parse(args.sizing),
            presentation_mode=args.presentation,
            title=args.title,
            author=args.author,
        )
        if args.width:
            config.slide_width_in = args.width
        if args.height:
            config.slide_height_in = args.height

        logger = ConversionLogger()

        loader = SceneLoader(logger=logger, config=config)
        slides = loader.load_file(input_path)

        if not slides:
            print("No slides found in file")
            sys.exit(1)

        writer = PPTXWriter(logger=logger, config=config)
        prs, blank_layout = writer.create_presentation()

        slide_count = 0
        for scene_slide in slides:
            elements = loader.extract_elements(scene_slide)
            writer.add_slide(prs, blank_layout, scene_slide, elements)
            slide_count += 1

        prs.save(output_path)
        print(f"Saved {output_path} ({slide_count} slides)")

        warnings = logger.get_warnings()
        if warnings:
            print(f"\nWarnings ({len(warnings)}):")
            for warning in warnings:
                print(f"  - {warning.message}")

    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
