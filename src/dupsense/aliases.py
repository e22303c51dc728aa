from dupsense.core.models import GroupOrder, HashAlgorithmName

HASH_ALIASES = {
    "xxh128": HashAlgorithmName.XXH128,
    "md5": HashAlgorithmName.MD5,
    "sha256": HashAlgorithmName.SHA256,
}

HASH_CHOICES = list(HASH_ALIASES.keys())

HASH_HELP_TEXT = (
    "Content digest used to confirm duplicates:\n"
    "  xxh128 : 128-bit xxHash3, fastest (default)\n"
    "  md5    : 128-bit MD5\n"
    "  sha256 : 256-bit SHA-256, slowest\n"
)

ORDER_ALIASES = {
    "discovery": GroupOrder.DISCOVERY,
    "waste": GroupOrder.WASTE,
}

ORDER_CHOICES = list(ORDER_ALIASES.keys())

ORDER_HELP_TEXT = (
    "Order of duplicate groups in the report:\n"
    "  discovery : order in which groups were found (default)\n"
    "  waste     : groups wasting the most space first\n"
)

EPILOG_TEXT = """
Examples:
  Find duplicates of 1KB and larger in Downloads
  %(prog)s -i ~/Downloads

  Only images between 500KB and 10MB, biggest waste first
  %(prog)s -i ~/Downloads -m 500KB -M 10MB -x .jpg .png --order waste

  Scan a directory relative to a workspace and print JSON
  %(prog)s -w ~/projects/game -i Assets --json > report.json

  Move the files flagged for deletion to trash (asks for confirmation)
  %(prog)s -i ~/Downloads --trash-recommended
"""
