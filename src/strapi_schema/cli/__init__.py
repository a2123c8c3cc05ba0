"""strapi-schema command line interface."""
