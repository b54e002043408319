"""Targets command: list supported platform/arch pairs."""

from setup_inspequte.release.target import get_supported_targets


def run(args) -> int:
    for platform, arch, target in get_supported_targets():
        aliases = ", ".join(target.target_triple_aliases)
        print(
            f"{platform}/{arch:<6} {target.target_triple:<28} "
            f"{target.archive_kind.value:<7} (aliases: {aliases})"
        )
    return 0
