"""Orders: configuration, model, stored records, storage and the order workflow."""