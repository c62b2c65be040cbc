"""Value types produced by the notation parser."""
