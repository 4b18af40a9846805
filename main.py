from taste_test.main import create_app

# ================================
# INIT
# ================================
app = create_app()

# ================================
# START
# ================================
if __name__ == "__main__":
    settings = app.extensions["taste_test"].settings
    app.run(host="0.0.0.0", port=settings.port)
