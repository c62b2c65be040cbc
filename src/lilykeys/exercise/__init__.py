"""Practice engines that score played notes against a parsed score."""
