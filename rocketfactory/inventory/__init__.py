"""Parts catalogue: configuration, model, stored documents, storage and lookups."""