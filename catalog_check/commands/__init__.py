"Subcommands of the catalog-check CLI."
