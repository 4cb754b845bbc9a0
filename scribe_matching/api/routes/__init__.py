# API Routes
